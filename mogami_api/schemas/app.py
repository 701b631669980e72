"""
App schemas
"""
from typing import ClassVar, FrozenSet, Optional
from pydantic import BaseModel, field_validator
from mogami_api.core.validators import is_url


class AppCreate(BaseModel):
    index: int
    name: str

    @field_validator("index")
    @classmethod
    def check_index(cls, value: int) -> int:
        if value < 0:
            raise ValueError("index must not be negative")
        return value

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name should not be empty")
        return value


class AppUpdate(BaseModel):
    """Partial update - only fields that were sent are applied"""

    # Sending null for these clears the stored value
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({
        "webhook_event_url",
        "webhook_secret",
        "webhook_verify_url",
    })

    name: Optional[str] = None
    webhook_accept_incoming: Optional[bool] = None
    webhook_event_enabled: Optional[bool] = None
    webhook_event_url: Optional[str] = None
    webhook_secret: Optional[str] = None
    webhook_verify_enabled: Optional[bool] = None
    webhook_verify_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("name should not be empty")
        return value.strip() if value is not None else None

    @field_validator("webhook_event_url")
    @classmethod
    def check_webhook_event_url(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_url(value):
            raise ValueError("webhookEventUrl must be a url")
        return value

    @field_validator("webhook_verify_url")
    @classmethod
    def check_webhook_verify_url(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_url(value):
            raise ValueError("webhookVerifyUrl must be a url")
        return value
