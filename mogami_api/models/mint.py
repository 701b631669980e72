"""
Mint model - a token definition scoped to a cluster
"""
from typing import Optional
from datetime import datetime
from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func
from mogami_api.core.database import Base, utcnow
import uuid


class Mint(Base):
    """Token mint. The address is unique within its cluster."""

    __tablename__ = "mints"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    address: Mapped[str] = mapped_column(String, nullable=False, index=True)
    cluster_id: Mapped[str] = mapped_column(String, ForeignKey("clusters.id", ondelete="CASCADE"), nullable=False, index=True)
    decimals: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String, nullable=False)
    symbol: Mapped[str] = mapped_column(String, nullable=False)
    logo_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    coin_gecko_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # Default mints are enabled on every new app environment of the cluster
    default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), onupdate=utcnow, nullable=True)

    __table_args__ = (
        UniqueConstraint('address', 'cluster_id', name='uq_mint_address_cluster'),
    )

    # Relationships
    cluster: Mapped["Cluster"] = relationship("Cluster", back_populates="mints")

    def __repr__(self):
        return f"<Mint {self.symbol} {self.address} ({self.cluster_id})>"
