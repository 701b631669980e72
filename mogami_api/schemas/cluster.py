"""
Cluster schemas
"""
from typing import Optional
from pydantic import BaseModel, field_validator
from mogami_api.core.validators import is_url
from mogami_api.models.cluster import ClusterStatus


class ClusterUpdate(BaseModel):
    name: Optional[str] = None
    status: Optional[ClusterStatus] = None
    endpoint: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("name should not be empty")
        return value.strip() if value is not None else None

    @field_validator("endpoint")
    @classmethod
    def check_endpoint(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_url(value):
            raise ValueError("endpoint must be a url")
        return value
