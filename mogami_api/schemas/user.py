"""
User schemas
"""
from pydantic import BaseModel, field_validator


class UserLogin(BaseModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("username should not be empty")
        return value
