from dataclasses import dataclass
from datetime import timedelta
from pydantic_settings import BaseSettings
from typing import List, Optional, Union
from pydantic import field_validator
import json

from app.core.exceptions import ServerMisconfiguredError


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    PROJECT_NAME: str = "Job Application Tracker API"
    PORT: int = 8000

    # Database Settings
    POSTGRES_USER: str = "user"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "job_tracker"

    @property
    def DATABASE_URL(self) -> str:
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # JWT Settings - one secret per token class
    ACCESS_TOKEN_SECRET: Optional[str] = None
    REFRESH_TOKEN_SECRET: Optional[str] = None
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Password / refresh token hashing cost
    BCRYPT_ROUNDS: int = 10

    # Refresh cookie
    REFRESH_COOKIE_SECURE: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False
    SLOW_REQUEST_THRESHOLD_MS: int = 500

    # CORS Settings - can be set as JSON string in .env
    BACKEND_CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:5173"]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[List[str], str]) -> List[str]:
        """Parse CORS origins from JSON string or list"""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not valid JSON, split by comma
                return [origin.strip() for origin in v.split(",")]
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


@dataclass(frozen=True)
class TokenSettings:
    """
    Signing configuration for the session protocol.

    Built once at startup from Settings and handed to the protocol
    through dependency injection.
    """
    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    access_token_ttl: timedelta = timedelta(minutes=15)
    refresh_token_ttl: timedelta = timedelta(days=7)

    @classmethod
    def from_settings(cls, config: Settings) -> "TokenSettings":
        """
        Validate the JWT secrets and build the token configuration.

        Raises:
            ServerMisconfiguredError: If a secret is missing or both
                token classes share the same secret
        """
        if not config.ACCESS_TOKEN_SECRET or not config.REFRESH_TOKEN_SECRET:
            raise ServerMisconfiguredError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must be set")
        if config.ACCESS_TOKEN_SECRET == config.REFRESH_TOKEN_SECRET:
            raise ServerMisconfiguredError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must differ")

        return cls(
            access_secret=config.ACCESS_TOKEN_SECRET,
            refresh_secret=config.REFRESH_TOKEN_SECRET,
            algorithm=config.ALGORITHM,
            access_token_ttl=timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_token_ttl=timedelta(days=config.REFRESH_TOKEN_EXPIRE_DAYS),
        )


settings = Settings()
