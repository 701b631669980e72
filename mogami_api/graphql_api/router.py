"""
GraphQL router for FastAPI
"""
from typing import Optional
from fastapi import Request
from strawberry.fastapi import GraphQLRouter
from strawberry.fastapi import BaseContext
from mogami_api.graphql_api.schema import schema
from mogami_api.core.database import AsyncSessionLocal
from mogami_api.core.dependencies import get_current_user


class GraphQLContext(BaseContext):
    """GraphQL context with request, db, and current user"""
    def __init__(self, request: Request, db, current_user: Optional[dict] = None):
        super().__init__()
        self.request = request
        self.db = db
        self.current_user = current_user


async def get_context(request: Request) -> GraphQLContext:
    """Get GraphQL context with current user and database"""
    # The session is committed and closed by GraphQLCleanupMiddleware
    db = AsyncSessionLocal()

    try:
        current_user = await get_current_user(request=request, db=db)

        # Store database session in request state for cleanup
        request.state.graphql_db = db

        return GraphQLContext(request=request, db=db, current_user=current_user)
    except Exception:
        await db.close()
        raise


# Create GraphQL router
graphql_router = GraphQLRouter(
    schema=schema,
    context_getter=get_context,
)
