"""
Cluster model - a Solana network the apps can run against
"""
from typing import Optional, List
from datetime import datetime
from sqlalchemy import String, DateTime, Enum
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func
from mogami_api.core.database import Base, utcnow
import enum


class ClusterType(str, enum.Enum):
    SOLANA_CUSTOM = "SolanaCustom"
    SOLANA_DEVNET = "SolanaDevnet"
    SOLANA_MAINNET = "SolanaMainnet"
    SOLANA_TESTNET = "SolanaTestnet"


class ClusterStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class Cluster(Base):
    """
    Seeded at startup and identified by a readable slug (e.g. ``solana-devnet``).
    Only name, status and endpoint can change afterwards.
    """
    __tablename__ = "clusters"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    type: Mapped[ClusterType] = mapped_column(Enum(ClusterType), nullable=False, index=True)
    status: Mapped[ClusterStatus] = mapped_column(Enum(ClusterStatus), nullable=False, default=ClusterStatus.ACTIVE, index=True)
    endpoint: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), onupdate=utcnow, nullable=True)

    # Relationships
    mints: Mapped[List["Mint"]] = relationship(
        "Mint",
        back_populates="cluster",
        cascade="all, delete-orphan",
        order_by="[Mint.order, Mint.created_at]",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Cluster {self.id} ({self.status})>"
