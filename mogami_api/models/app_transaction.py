"""
App transaction models
"""
from typing import Any, Optional, List
from datetime import datetime
from sqlalchemy import String, Integer, BigInteger, DateTime, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func
from mogami_api.core.database import Base, utcnow
import uuid
import enum


class AppTransactionStatus(str, enum.Enum):
    COMMITTED = "Committed"
    CONFIRMED = "Confirmed"
    FINALIZED = "Finalized"
    FAILED = "Failed"


class AppTransactionErrorType(str, enum.Enum):
    BAD_NONCE = "BadNonce"
    INVALID_ACCOUNT = "InvalidAccount"
    SOME_ERROR = "SomeError"
    TIMEOUT = "Timeout"
    UNKNOWN = "Unknown"
    WEBHOOK_FAILED = "WebhookFailed"


class AppTransaction(Base):
    """A transfer recorded for an app environment, with its lifecycle timestamps"""

    __tablename__ = "app_transactions"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    app_env_id: Mapped[str] = mapped_column(String, ForeignKey("app_envs.id", ondelete="CASCADE"), nullable=False, index=True)
    amount: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    destination: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    fee_payer: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    mint: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    signature: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    source: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[AppTransactionStatus] = mapped_column(
        Enum(AppTransactionStatus), nullable=False, default=AppTransactionStatus.COMMITTED, index=True
    )
    solana_start: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    solana_end: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    solana_finalized: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    solana_transaction: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    webhook_event_start: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    webhook_event_end: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    webhook_verify_start: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    webhook_verify_end: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), onupdate=utcnow, nullable=True)

    # Relationships
    app_env: Mapped["AppEnv"] = relationship("AppEnv", back_populates="transactions")
    errors: Mapped[List["AppTransactionError"]] = relationship(
        "AppTransactionError",
        back_populates="app_transaction",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<AppTransaction {self.signature or self.id} ({self.status})>"


class AppTransactionError(Base):
    __tablename__ = "app_transaction_errors"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    app_transaction_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_transactions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    message: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    type: Mapped[AppTransactionErrorType] = mapped_column(
        Enum(AppTransactionErrorType), nullable=False, default=AppTransactionErrorType.UNKNOWN
    )
    instruction: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    # Relationships
    app_transaction: Mapped["AppTransaction"] = relationship("AppTransaction", back_populates="errors")

    def __repr__(self):
        return f"<AppTransactionError {self.type} {self.message}>"
