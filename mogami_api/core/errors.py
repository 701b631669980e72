"""
API error taxonomy.

Resolvers raise these; graphql-core copies ``extensions`` from the original
exception onto the GraphQL error, so every entry in ``errors`` carries a
machine readable ``extensions.code`` next to its message.
"""
from typing import Any, Dict, Optional


class ApiError(Exception):
    """Base class for errors returned to GraphQL callers"""

    code = "INTERNAL_SERVER_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def extensions(self) -> Dict[str, Any]:
        return {"code": self.code}


class UnauthorizedError(ApiError):
    """Missing, invalid or expired credential"""

    code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class ForbiddenError(ApiError):
    """Authenticated, but not allowed to touch the resource"""

    code = "FORBIDDEN"
    default_message = "Forbidden"


class NotFoundError(ApiError):
    code = "NOT_FOUND"
    default_message = "Not found"

    @classmethod
    def for_entity(cls, entity: str, entity_id: Optional[str] = None) -> "NotFoundError":
        if entity_id:
            return cls(f"{entity} with id {entity_id} not found")
        return cls(f"{entity} not found")


class ValidationError(ApiError):
    code = "BAD_USER_INPUT"
    default_message = "Invalid input"


class ConflictError(ApiError):
    """Uniqueness constraint violation"""

    code = "CONFLICT"
    default_message = "Resource already exists"


def messages_from_pydantic(exc) -> str:
    """Flatten a pydantic ValidationError into the messages raised by our validators"""
    messages = []
    for err in exc.errors():
        ctx_error = (err.get("ctx") or {}).get("error")
        if ctx_error is not None:
            messages.append(str(ctx_error))
        else:
            field = ".".join(str(part) for part in err.get("loc", ()))
            messages.append(f"{field}: {err.get('msg')}" if field else err.get("msg", ""))
    return "; ".join(messages)
