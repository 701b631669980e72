"""
App environment and app mint schemas
"""
from typing import Optional
from pydantic import BaseModel, field_validator


class AppEnvCreate(BaseModel):
    # Falls back to the cluster name when omitted
    name: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("name should not be empty")
        return value


class AppMintUpdate(BaseModel):
    add_memo: Optional[bool] = None
    order: Optional[int] = None

    @field_validator("order")
    @classmethod
    def check_order(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 0:
            raise ValueError("order must not be negative")
        return value
