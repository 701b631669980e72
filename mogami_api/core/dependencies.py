"""
Authentication and authorization helpers shared by the GraphQL resolvers
"""
import logging
from typing import Any, Dict, Optional
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from mogami_api.core.errors import ForbiddenError, UnauthorizedError
from mogami_api.core.security import decode_access_token
from mogami_api.models.app import AppUser
from mogami_api.models.app_env import AppEnv
from mogami_api.models.user import User

logger = logging.getLogger(__name__)


def get_token_from_request(request: Request) -> Optional[str]:
    """
    Extract JWT token from request - checks cookie first, then Authorization header.
    Returns None if no token found.
    """
    token = request.cookies.get("access_token")

    if not token:
        auth_header = request.headers.get("authorization")
        if auth_header:
            scheme, _, credentials = auth_header.partition(" ")
            if scheme.lower() == "bearer":
                token = credentials.strip() or None

    return token


def user_to_dict(user: User) -> Dict[str, Any]:
    """Plain representation of the caller stored on the GraphQL context"""
    return {
        "id": user.id,
        "username": user.username,
        "name": user.name,
        "role": user.role.value,
        "is_admin": user.is_admin,
    }


async def get_current_user(request: Request, db: AsyncSession) -> Optional[Dict[str, Any]]:
    """
    Resolve the caller from the request credential.
    Returns None when the credential is missing, invalid, expired or belongs
    to an unknown or inactive user.
    """
    token = get_token_from_request(request)
    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None or not user.is_active:
        logger.debug(f"Token subject {user_id} is unknown or inactive")
        return None

    return user_to_dict(user)


def require_user(context) -> Dict[str, Any]:
    """Gate for every operation that needs a session"""
    current_user = getattr(context, "current_user", None)
    if not current_user:
        raise UnauthorizedError()
    return current_user


def require_admin(context) -> Dict[str, Any]:
    current_user = require_user(context)
    if not current_user.get("is_admin", False):
        raise ForbiddenError("Forbidden: admin role required")
    return current_user


async def require_app_access(context, app_id: str) -> Dict[str, Any]:
    """Admins can access every app, other users only the apps they belong to"""
    current_user = require_user(context)
    if current_user.get("is_admin", False):
        return current_user

    result = await context.db.execute(
        select(AppUser.id).where(AppUser.app_id == app_id, AppUser.user_id == current_user["id"])
    )
    if result.scalar_one_or_none() is None:
        raise ForbiddenError("Forbidden: you are not a member of this app")
    return current_user


async def require_app_env_access(context, app_env_id: str) -> Dict[str, Any]:
    """Same rule as require_app_access, for callers that only know the environment"""
    current_user = require_user(context)
    if current_user.get("is_admin", False):
        return current_user

    result = await context.db.execute(
        select(AppUser.id)
        .join(AppEnv, AppEnv.app_id == AppUser.app_id)
        .where(AppEnv.id == app_env_id, AppUser.user_id == current_user["id"])
    )
    if result.scalar_one_or_none() is None:
        raise ForbiddenError("Forbidden: you are not a member of this app")
    return current_user
