"""
Database models
"""
from mogami_api.models.user import User, UserRole
from mogami_api.models.cluster import Cluster, ClusterStatus, ClusterType
from mogami_api.models.mint import Mint
from mogami_api.models.app import App, AppUser, AppUserRole
from mogami_api.models.app_env import AppEnv, AppMint
from mogami_api.models.app_transaction import (
    AppTransaction,
    AppTransactionError,
    AppTransactionErrorType,
    AppTransactionStatus,
)

__all__ = [
    "User",
    "UserRole",
    "Cluster",
    "ClusterStatus",
    "ClusterType",
    "Mint",
    "App",
    "AppUser",
    "AppUserRole",
    "AppEnv",
    "AppMint",
    "AppTransaction",
    "AppTransactionError",
    "AppTransactionErrorType",
    "AppTransactionStatus",
]
