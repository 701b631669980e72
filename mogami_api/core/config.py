"""
Application configuration using Pydantic settings
"""
from typing import List, Literal, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


SOLANA_RPC_ENDPOINT_ERROR = (
    "SOLANA_RPC_ENDPOINT is required. Provide 'mainnet-beta' | 'devnet' | 'testnet' or a Solana RPC URL"
)

# Named cluster monikers and the public RPC endpoint they resolve to
SOLANA_RPC_MONIKERS = {
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
    "devnet": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
}


class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20

    # Solana
    MOGAMI_SUBSIDIZER_SECRET_KEY: str
    MOGAMI_MINT_PUBLIC_KEY: str
    SOLANA_RPC_ENDPOINT: str

    # JWT
    JWT_SECRET_KEY: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Seeded admin account
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: Optional[str] = None

    # Application
    APP_NAME: str = "Mogami API"
    APP_VERSION: str = "1.0.0"
    NODE_ENV: Literal["development", "production", "test"] = "development"
    PORT: int = 3000
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:4200"

    # Encryption key for webhook secrets at rest (Fernet key - 32 url-safe base64-encoded bytes)
    SECRETS_ENCRYPTION_KEY: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def normalize_database_url(cls, value: str) -> str:
        """asyncpg needs the postgresql+asyncpg:// scheme"""
        value = value.strip()
        if not value:
            raise ValueError("DATABASE_URL is required")
        if value.startswith("postgres://"):
            value = value.replace("postgres://", "postgresql+asyncpg://", 1)
        elif value.startswith("postgresql://"):
            value = value.replace("postgresql://", "postgresql+asyncpg://", 1)
        return value

    @field_validator("MOGAMI_SUBSIDIZER_SECRET_KEY", "MOGAMI_MINT_PUBLIC_KEY")
    @classmethod
    def require_non_empty(cls, value: str, info) -> str:
        if not value or not value.strip():
            raise ValueError(f"{info.field_name} is required")
        return value.strip()

    @field_validator("SOLANA_RPC_ENDPOINT")
    @classmethod
    def validate_solana_rpc_endpoint(cls, value: str) -> str:
        value = (value or "").strip()
        if value in SOLANA_RPC_MONIKERS:
            return value
        if value.startswith("http://") or value.startswith("https://"):
            return value
        raise ValueError(SOLANA_RPC_ENDPOINT_ERROR)

    @property
    def solana_rpc_url(self) -> str:
        """Resolve the configured moniker to a full RPC URL"""
        return SOLANA_RPC_MONIKERS.get(self.SOLANA_RPC_ENDPOINT, self.SOLANA_RPC_ENDPOINT)

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.NODE_ENV == "production"

    @property
    def jwt_secret(self) -> str:
        """JWT signing secret; a fixed fallback is only allowed outside production"""
        if self.JWT_SECRET_KEY:
            return self.JWT_SECRET_KEY
        if self.is_production:
            raise RuntimeError("JWT_SECRET_KEY is not configured")
        return f"{self.APP_NAME}-{self.NODE_ENV}-secret"


settings = Settings()
