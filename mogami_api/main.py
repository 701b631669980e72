"""
Main FastAPI application entry point
"""
from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from mogami_api.core.config import settings
from mogami_api.core.database import AsyncSessionLocal, init_db, close_db
from mogami_api.core.seed import seed_database
from mogami_api.api.router import api_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    try:
        logger.info(f"Starting application ({settings.NODE_ENV})...")
        await init_db()
        async with AsyncSessionLocal() as db:
            await seed_database(db)
        logger.info(f"Application started successfully, Solana RPC: {settings.solana_rpc_url}")
    except Exception as e:
        logger.error(f"Failed to start application: {e}")
        logger.error("Please check:")
        logger.error("1. The database is running and DATABASE_URL is correct in .env file")
        logger.error("2. Database credentials are correct")
        raise
    yield
    # Shutdown - close database connections
    logger.info("Shutting down application...")
    await close_db()
    logger.info("Application shut down successfully")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Mogami API - GraphQL API for apps, environments, clusters and mints",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class GraphQLCleanupMiddleware(BaseHTTPMiddleware):
    """Middleware to ensure GraphQL database sessions are properly closed"""
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        if hasattr(request.state, 'graphql_db'):
            db = request.state.graphql_db
            try:
                await db.commit()
            except Exception:
                logger.exception("Failed to commit GraphQL session, rolling back")
                await db.rollback()
            finally:
                await db.close()
        return response


app.add_middleware(GraphQLCleanupMiddleware)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "version": settings.APP_VERSION}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "mogami_api.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
    )
