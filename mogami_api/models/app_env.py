"""
App environment model - binds an app to a cluster
"""
from typing import Optional, List
from datetime import datetime
from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func
from mogami_api.core.database import Base, utcnow
import uuid


class AppEnv(Base):
    """AppEnv model - belongs to exactly one app and one cluster"""

    __tablename__ = "app_envs"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    # app_id and cluster_id never change after creation
    app_id: Mapped[str] = mapped_column(String, ForeignKey("apps.id", ondelete="CASCADE"), nullable=False, index=True)
    cluster_id: Mapped[str] = mapped_column(String, ForeignKey("clusters.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), onupdate=utcnow, nullable=True)

    # Relationships
    app: Mapped["App"] = relationship("App", back_populates="envs", lazy="selectin")
    cluster: Mapped["Cluster"] = relationship("Cluster", lazy="selectin")
    mints: Mapped[List["AppMint"]] = relationship(
        "AppMint",
        back_populates="app_env",
        cascade="all, delete-orphan",
        order_by="[AppMint.order, AppMint.created_at]",
        lazy="selectin",
    )
    transactions: Mapped[List["AppTransaction"]] = relationship(
        "AppTransaction",
        back_populates="app_env",
        cascade="all, delete-orphan",
        lazy="noload",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<AppEnv {self.name} ({self.cluster_id})>"


class AppMint(Base):
    """A mint enabled for an app environment"""

    __tablename__ = "app_mints"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    app_env_id: Mapped[str] = mapped_column(String, ForeignKey("app_envs.id", ondelete="CASCADE"), nullable=False, index=True)
    mint_id: Mapped[str] = mapped_column(String, ForeignKey("mints.id", ondelete="CASCADE"), nullable=False, index=True)
    add_memo: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), onupdate=utcnow, nullable=True)

    __table_args__ = (
        UniqueConstraint('app_env_id', 'mint_id', name='uq_app_mint_env_mint'),
    )

    # Relationships
    app_env: Mapped["AppEnv"] = relationship("AppEnv", back_populates="mints")
    mint: Mapped["Mint"] = relationship("Mint", lazy="selectin")

    def __repr__(self):
        return f"<AppMint {self.mint_id} in {self.app_env_id}>"
