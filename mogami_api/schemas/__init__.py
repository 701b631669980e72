"""
Pydantic schemas for input validation
"""
from mogami_api.schemas.user import UserLogin
from mogami_api.schemas.cluster import ClusterUpdate
from mogami_api.schemas.mint import MintCreate
from mogami_api.schemas.app import AppCreate, AppUpdate
from mogami_api.schemas.app_env import AppEnvCreate, AppMintUpdate

__all__ = [
    "UserLogin",
    "ClusterUpdate",
    "MintCreate",
    "AppCreate", "AppUpdate",
    "AppEnvCreate", "AppMintUpdate",
]
