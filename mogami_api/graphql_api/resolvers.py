"""
GraphQL resolvers for queries and mutations - SQLAlchemy version

Lookups raise NotFoundError for unknown ids. Every creation flow adds all of
its rows to the session and commits once, so a failure leaves nothing behind.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from mogami_api.core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError, messages_from_pydantic
from mogami_api.core.security import create_access_token, decrypt_secret, encrypt_secret, verify_password
from mogami_api.core.seed import DEFAULT_CLUSTER_ID
from mogami_api.models.app import App, AppUser, AppUserRole
from mogami_api.models.app_env import AppEnv, AppMint
from mogami_api.models.app_transaction import AppTransaction, AppTransactionStatus
from mogami_api.models.cluster import Cluster, ClusterStatus
from mogami_api.models.mint import Mint
from mogami_api.models.user import User
from mogami_api.graphql_api.types import (
    App as AppType, AppEnv as AppEnvType, AppMint as AppMintType, AppUser as AppUserType,
    AppEnvStats as AppEnvStatsType, AppTransaction as AppTransactionType,
    AppTransactionError as AppTransactionErrorType, AppTransactionStatusCount,
    Cluster as ClusterType, Mint as MintType, User as UserType, UserToken as UserTokenType,
)

logger = logging.getLogger(__name__)


def parse_input(schema, data: Dict[str, Any]):
    """Validate resolver input with a pydantic schema"""
    try:
        return schema(**data)
    except PydanticValidationError as e:
        raise ValidationError(messages_from_pydantic(e))


def model_to_user(user: User) -> UserType:
    """Convert User model to GraphQL type"""
    return UserType(
        id=user.id,
        username=user.username,
        name=user.name,
        role=user.role.value,
    )


def model_to_mint(mint: Mint) -> MintType:
    return MintType(
        id=mint.id,
        address=mint.address,
        cluster_id=mint.cluster_id,
        decimals=mint.decimals,
        name=mint.name,
        symbol=mint.symbol,
        logo_url=mint.logo_url,
        coin_gecko_id=mint.coin_gecko_id,
        default=mint.default,
        order=mint.order,
        created_at=mint.created_at,
        updated_at=mint.updated_at,
    )


def model_to_cluster(cluster: Cluster) -> ClusterType:
    """Convert Cluster model to GraphQL type"""
    return ClusterType(
        id=cluster.id,
        name=cluster.name,
        type=cluster.type.value,
        status=cluster.status.value,
        endpoint=cluster.endpoint,
        created_at=cluster.created_at,
        updated_at=cluster.updated_at,
        mints=[model_to_mint(m) for m in (cluster.mints or [])],
    )


def model_to_app_mint(app_mint: AppMint) -> AppMintType:
    return AppMintType(
        id=app_mint.id,
        add_memo=app_mint.add_memo,
        order=app_mint.order,
        app_env_id=app_mint.app_env_id,
        mint=model_to_mint(app_mint.mint),
    )


def model_to_app(app: App, include_nested: bool = True) -> AppType:
    """Convert App model to GraphQL type

    Args:
        app: The App model instance
        include_nested: If False, skip envs and users (for nested contexts)
    """
    envs = []
    users = []
    if include_nested:
        envs = [model_to_app_env(e, include_app=False) for e in (app.envs or [])]
        users = [
            AppUserType(id=u.id, role=u.role.value, user=model_to_user(u.user))
            for u in (app.users or [])
        ]

    return AppType(
        id=app.id,
        index=app.index,
        name=app.name,
        webhook_accept_incoming=app.webhook_accept_incoming,
        webhook_event_enabled=app.webhook_event_enabled,
        webhook_event_url=app.webhook_event_url,
        webhook_secret=decrypt_secret(app.webhook_secret),
        webhook_verify_enabled=app.webhook_verify_enabled,
        webhook_verify_url=app.webhook_verify_url,
        created_at=app.created_at,
        updated_at=app.updated_at,
        envs=envs,
        users=users,
    )


def model_to_app_env(env: AppEnv, include_app: bool = True) -> AppEnvType:
    """Convert AppEnv model to GraphQL type"""
    app = None
    if include_app and env.app is not None:
        app = model_to_app(env.app, include_nested=False)

    return AppEnvType(
        id=env.id,
        name=env.name,
        app_id=env.app_id,
        cluster_id=env.cluster_id,
        app=app,
        cluster=model_to_cluster(env.cluster) if env.cluster is not None else None,
        mints=[model_to_app_mint(m) for m in (env.mints or [])],
        created_at=env.created_at,
        updated_at=env.updated_at,
    )


def model_to_app_transaction(tx: AppTransaction) -> AppTransactionType:
    return AppTransactionType(
        id=tx.id,
        app_env_id=tx.app_env_id,
        amount=tx.amount,
        destination=tx.destination,
        errors=[
            AppTransactionErrorType(id=e.id, message=e.message, type=e.type.value, instruction=e.instruction)
            for e in (tx.errors or [])
        ],
        fee_payer=tx.fee_payer,
        mint=tx.mint,
        signature=tx.signature,
        solana_start=tx.solana_start,
        solana_end=tx.solana_end,
        solana_finalized=tx.solana_finalized,
        solana_transaction=tx.solana_transaction,
        source=tx.source,
        status=tx.status.value,
        webhook_event_start=tx.webhook_event_start,
        webhook_event_end=tx.webhook_event_end,
        webhook_verify_start=tx.webhook_verify_start,
        webhook_verify_end=tx.webhook_verify_end,
        created_at=tx.created_at,
        updated_at=tx.updated_at,
    )


# Lookups

async def get_cluster(db: AsyncSession, cluster_id: str) -> Cluster:
    result = await db.execute(
        select(Cluster).where(Cluster.id == cluster_id).execution_options(populate_existing=True)
    )
    cluster = result.scalar_one_or_none()
    if cluster is None:
        raise NotFoundError.for_entity("Cluster", cluster_id)
    return cluster


async def get_app(db: AsyncSession, app_id: str) -> App:
    result = await db.execute(
        select(App).where(App.id == app_id).execution_options(populate_existing=True)
    )
    app = result.scalar_one_or_none()
    if app is None:
        raise NotFoundError.for_entity("App", app_id)
    return app


async def get_app_env(db: AsyncSession, app_id: str, app_env_id: str) -> AppEnv:
    """The environment must belong to the given app"""
    result = await db.execute(
        select(AppEnv)
        .where(AppEnv.id == app_env_id, AppEnv.app_id == app_id)
        .execution_options(populate_existing=True)
    )
    env = result.scalar_one_or_none()
    if env is None:
        raise NotFoundError.for_entity("AppEnv", app_env_id)
    return env


async def get_app_env_by_id(db: AsyncSession, app_env_id: str) -> AppEnv:
    env = await db.get(AppEnv, app_env_id)
    if env is None:
        raise NotFoundError.for_entity("AppEnv", app_env_id)
    return env


async def get_app_mint(db: AsyncSession, app_id: str, app_mint_id: str) -> AppMint:
    """The app mint must belong to one of the app's environments"""
    result = await db.execute(
        select(AppMint)
        .join(AppEnv, AppMint.app_env_id == AppEnv.id)
        .where(AppMint.id == app_mint_id, AppEnv.app_id == app_id)
        .execution_options(populate_existing=True)
    )
    app_mint = result.scalar_one_or_none()
    if app_mint is None:
        raise NotFoundError.for_entity("AppMint", app_mint_id)
    return app_mint


async def commit_or_conflict(db: AsyncSession, message: str) -> None:
    """Commit the pending unit of work; unique violations become ConflictError"""
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.info(f"{message}: {e.orig}")
        raise ConflictError(message)


def default_app_mints(cluster: Cluster) -> List[AppMint]:
    return [
        AppMint(mint_id=mint.id, add_memo=False, order=mint.order)
        for mint in (cluster.mints or [])
        if mint.default
    ]


# Queries

async def resolve_clusters(db: AsyncSession, active_only: bool = True) -> List[ClusterType]:
    query = select(Cluster).order_by(Cluster.id)
    if active_only:
        query = query.where(Cluster.status == ClusterStatus.ACTIVE)
    result = await db.execute(query)
    return [model_to_cluster(c) for c in result.scalars().all()]


async def resolve_apps(db: AsyncSession, current_user: Optional[Dict] = None) -> List[AppType]:
    """Apps the user is a member of; pass no user to list every app"""
    query = select(App).order_by(App.index)
    if current_user is not None:
        query = query.join(AppUser, AppUser.app_id == App.id).where(AppUser.user_id == current_user["id"])
    result = await db.execute(query)
    return [model_to_app(a) for a in result.scalars().unique().all()]


async def resolve_app_env_stats(db: AsyncSession, app_env_id: str) -> AppEnvStatsType:
    await get_app_env_by_id(db, app_env_id)
    result = await db.execute(
        select(AppTransaction.status, func.count(AppTransaction.id))
        .where(AppTransaction.app_env_id == app_env_id)
        .group_by(AppTransaction.status)
    )
    counts = {status: count for status, count in result.all()}
    return AppEnvStatsType(
        transaction_count=sum(counts.values()),
        transaction_status_counts=[
            AppTransactionStatusCount(status=status.value, count=counts.get(status, 0))
            for status in AppTransactionStatus
        ],
    )


async def resolve_app_transactions(
    db: AsyncSession,
    app_env_id: str,
    limit: int = 100,
    offset: int = 0,
) -> Tuple[List[AppTransactionType], int]:
    """Newest first, with the total count for pagination"""
    count_result = await db.execute(
        select(func.count(AppTransaction.id)).where(AppTransaction.app_env_id == app_env_id)
    )
    total = count_result.scalar_one()

    result = await db.execute(
        select(AppTransaction)
        .where(AppTransaction.app_env_id == app_env_id)
        .order_by(AppTransaction.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    items = [model_to_app_transaction(tx) for tx in result.scalars().all()]
    return (items, total)


async def resolve_app_transaction(db: AsyncSession, app_env_id: str, app_transaction_id: str) -> AppTransactionType:
    result = await db.execute(
        select(AppTransaction).where(
            AppTransaction.id == app_transaction_id,
            AppTransaction.app_env_id == app_env_id,
        )
    )
    tx = result.scalar_one_or_none()
    if tx is None:
        raise NotFoundError.for_entity("AppTransaction", app_transaction_id)
    return model_to_app_transaction(tx)


# Mutations

async def login_user(db: AsyncSession, username: str, password: str) -> UserTokenType:
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active or not verify_password(password, user.password_hash):
        logger.info(f"Rejected login for {username}")
        raise UnauthorizedError()

    token = create_access_token(user.id, extra_claims={"username": user.username, "role": user.role.value})
    logger.info(f"User {username} logged in")
    return UserTokenType(token=token, user=model_to_user(user))


async def create_app(db: AsyncSession, index: int, name: str, owner_id: str) -> App:
    """
    Create an app together with its owner membership and its default
    environment on the default cluster, in a single transaction.
    """
    cluster = await get_cluster(db, DEFAULT_CLUSTER_ID)
    if cluster.status != ClusterStatus.ACTIVE:
        raise ValidationError(f"Cluster {cluster.id} is not active")

    app = App(index=index, name=name)
    app.users.append(AppUser(user_id=owner_id, role=AppUserRole.OWNER))
    app.envs.append(AppEnv(
        name=cluster.name,
        cluster_id=cluster.id,
        mints=default_app_mints(cluster),
    ))
    db.add(app)
    await commit_or_conflict(db, f"App with index {index} already exists")
    logger.info(f"Created app {app.id} (index {index}) with default env on {cluster.id}")
    return await get_app(db, app.id)


async def update_app(db: AsyncSession, app_id: str, changes: Dict[str, Any]) -> App:
    app = await get_app(db, app_id)
    for field, value in changes.items():
        if field == "webhook_secret":
            value = encrypt_secret(value)
        setattr(app, field, value)
    await commit_or_conflict(db, "Failed to update app")
    return await get_app(db, app_id)


async def create_app_env(db: AsyncSession, app: App, cluster: Cluster, name: Optional[str]) -> AppEnv:
    env = AppEnv(
        name=name or cluster.name,
        app_id=app.id,
        cluster_id=cluster.id,
        mints=default_app_mints(cluster),
    )
    db.add(env)
    await commit_or_conflict(db, "Failed to create app environment")
    logger.info(f"Created env {env.id} for app {app.id} on {cluster.id}")
    return await get_app_env(db, app.id, env.id)


async def create_mint(db: AsyncSession, cluster: Cluster, data: Dict[str, Any]) -> Cluster:
    """Create a mint and return its cluster with the full mint collection"""
    existing = await db.execute(
        select(Mint.id).where(Mint.cluster_id == cluster.id, Mint.address == data["address"])
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError(f"Mint {data['address']} already exists on {cluster.id}")

    order_result = await db.execute(select(func.count(Mint.id)).where(Mint.cluster_id == cluster.id))
    mint = Mint(cluster_id=cluster.id, order=order_result.scalar_one(), **data)
    db.add(mint)
    await commit_or_conflict(db, f"Mint {data['address']} already exists on {cluster.id}")
    logger.info(f"Created mint {mint.symbol} {mint.address} on {cluster.id}")
    return await get_cluster(db, cluster.id)


async def update_app_mint(db: AsyncSession, app_id: str, app_mint_id: str, changes: Dict[str, Any]) -> AppMint:
    app_mint = await get_app_mint(db, app_id, app_mint_id)
    for field, value in changes.items():
        setattr(app_mint, field, value)
    await commit_or_conflict(db, "Failed to update app mint")
    return await get_app_mint(db, app_id, app_mint_id)


async def add_app_env_mint(db: AsyncSession, env: AppEnv, mint_id: str) -> AppEnv:
    mint = await db.get(Mint, mint_id)
    if mint is None:
        raise NotFoundError.for_entity("Mint", mint_id)
    if mint.cluster_id != env.cluster_id:
        raise ValidationError(f"Mint {mint.address} does not belong to cluster {env.cluster_id}")
    if any(m.mint_id == mint.id for m in env.mints):
        raise ConflictError(f"Mint {mint.address} is already enabled for this environment")

    env.mints.append(AppMint(mint_id=mint.id, add_memo=False, order=len(env.mints)))
    await commit_or_conflict(db, f"Mint {mint.address} is already enabled for this environment")
    return await get_app_env(db, env.app_id, env.id)


async def delete_app_env_mint(db: AsyncSession, env: AppEnv, app_mint_id: str) -> AppEnv:
    app_mint = next((m for m in env.mints if m.id == app_mint_id), None)
    if app_mint is None:
        raise NotFoundError.for_entity("AppMint", app_mint_id)
    env.mints.remove(app_mint)
    await db.commit()
    return await get_app_env(db, env.app_id, env.id)


async def update_cluster(db: AsyncSession, cluster_id: str, changes: Dict[str, Any]) -> Cluster:
    cluster = await get_cluster(db, cluster_id)
    for field, value in changes.items():
        setattr(cluster, field, value)
    await commit_or_conflict(db, "Failed to update cluster")
    return await get_cluster(db, cluster_id)
