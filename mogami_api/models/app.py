"""
App model - top level tenant entity
"""
from typing import Optional, List
from datetime import datetime
from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint, Enum
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func
from mogami_api.core.database import Base, utcnow
import uuid
import enum


class AppUserRole(str, enum.Enum):
    OWNER = "Owner"
    MEMBER = "Member"


class App(Base):
    """App model - owns one or more environments"""

    __tablename__ = "apps"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    index: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    webhook_accept_incoming: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    webhook_event_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    webhook_event_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    webhook_secret: Mapped[Optional[str]] = mapped_column(String, nullable=True)  # encrypted at rest
    webhook_verify_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    webhook_verify_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), onupdate=utcnow, nullable=True)

    __table_args__ = (
        UniqueConstraint('index', name='uq_app_index'),
    )

    # Relationships
    envs: Mapped[List["AppEnv"]] = relationship(
        "AppEnv",
        back_populates="app",
        cascade="all, delete-orphan",
        order_by="AppEnv.created_at",
        lazy="selectin",
    )
    users: Mapped[List["AppUser"]] = relationship(
        "AppUser",
        back_populates="app",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<App {self.index} {self.name}>"


class AppUser(Base):
    """Membership of a user in an app"""

    __tablename__ = "app_users"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    app_id: Mapped[str] = mapped_column(String, ForeignKey("apps.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role: Mapped[AppUserRole] = mapped_column(Enum(AppUserRole), nullable=False, default=AppUserRole.MEMBER)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    __table_args__ = (
        UniqueConstraint('app_id', 'user_id', name='uq_app_user'),
    )

    # Relationships
    app: Mapped["App"] = relationship("App", back_populates="users")
    user: Mapped["User"] = relationship("User", back_populates="apps", lazy="selectin")

    def __repr__(self):
        return f"<AppUser {self.user_id} in {self.app_id} ({self.role})>"
