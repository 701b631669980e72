"""
Mint schemas
"""
from typing import Optional
from pydantic import BaseModel, field_validator
from mogami_api.core.validators import is_public_key, is_url


class MintCreate(BaseModel):
    address: str
    cluster_id: str
    decimals: int
    name: str
    symbol: str
    logo_url: Optional[str] = None
    coin_gecko_id: Optional[str] = None

    @field_validator("address")
    @classmethod
    def check_address(cls, value: str) -> str:
        value = value.strip()
        if not is_public_key(value):
            raise ValueError("address must be a valid public key")
        return value

    @field_validator("decimals")
    @classmethod
    def check_decimals(cls, value: int) -> int:
        if value < 0:
            raise ValueError("decimals must not be negative")
        return value

    @field_validator("cluster_id", "name", "symbol")
    @classmethod
    def check_required(cls, value: str, info) -> str:
        value = value.strip()
        if not value:
            raise ValueError(f"{info.field_name} should not be empty")
        return value

    @field_validator("logo_url")
    @classmethod
    def check_logo_url(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_url(value):
            raise ValueError("logoUrl must be a url")
        return value
