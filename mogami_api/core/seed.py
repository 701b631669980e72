"""
Idempotent seed data: clusters, their default mints and the admin account
"""
import logging
from dataclasses import dataclass
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from mogami_api.core.config import settings
from mogami_api.core.security import hash_password
from mogami_api.models.cluster import Cluster, ClusterStatus, ClusterType
from mogami_api.models.mint import Mint
from mogami_api.models.user import User, UserRole

logger = logging.getLogger(__name__)

DEFAULT_CLUSTER_ID = "solana-devnet"


@dataclass(frozen=True)
class ClusterSeed:
    id: str
    name: str
    type: ClusterType
    status: ClusterStatus
    endpoint: str


CLUSTERS: List[ClusterSeed] = [
    ClusterSeed("solana-custom", "Solana Custom", ClusterType.SOLANA_CUSTOM, ClusterStatus.INACTIVE, "http://localhost:8899"),
    ClusterSeed("solana-devnet", "Solana Devnet", ClusterType.SOLANA_DEVNET, ClusterStatus.ACTIVE, "https://api.devnet.solana.com"),
    ClusterSeed("solana-mainnet", "Solana Mainnet", ClusterType.SOLANA_MAINNET, ClusterStatus.ACTIVE, "https://api.mainnet-beta.solana.com"),
    ClusterSeed("solana-testnet", "Solana Testnet", ClusterType.SOLANA_TESTNET, ClusterStatus.INACTIVE, "https://api.testnet.solana.com"),
]

DEFAULT_MINT_NAME = "Mogami"
DEFAULT_MINT_SYMBOL = "MOG"
DEFAULT_MINT_DECIMALS = 0


async def seed_clusters(db: AsyncSession) -> int:
    """Create missing clusters and their default mint, returns the number of clusters created"""
    created = 0
    for seed in CLUSTERS:
        cluster = await db.get(Cluster, seed.id)
        if cluster is None:
            cluster = Cluster(id=seed.id, name=seed.name, type=seed.type, status=seed.status, endpoint=seed.endpoint)
            db.add(cluster)
            created += 1

        mint_result = await db.execute(
            select(Mint.id).where(Mint.cluster_id == seed.id, Mint.address == settings.MOGAMI_MINT_PUBLIC_KEY)
        )
        if mint_result.scalar_one_or_none() is None:
            db.add(Mint(
                address=settings.MOGAMI_MINT_PUBLIC_KEY,
                cluster_id=seed.id,
                decimals=DEFAULT_MINT_DECIMALS,
                name=DEFAULT_MINT_NAME,
                symbol=DEFAULT_MINT_SYMBOL,
                default=True,
                order=0,
            ))
    await db.flush()
    return created


async def ensure_user(
    db: AsyncSession,
    username: str,
    password: Optional[str] = None,
    role: UserRole = UserRole.USER,
    name: Optional[str] = None,
) -> User:
    """Get or create a user; an existing user's password and role are left untouched"""
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is not None:
        return user

    user = User(
        username=username,
        name=name or username,
        password_hash=hash_password(password) if password else None,
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.flush()
    logger.info(f"Created {role.value} user {username}")
    return user


async def seed_database(db: AsyncSession) -> None:
    created = await seed_clusters(db)
    if created:
        logger.info(f"Seeded {created} clusters")

    if not settings.ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD is not set, the admin account cannot log in")
    await ensure_user(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD, role=UserRole.ADMIN, name="Admin")
    await db.commit()
