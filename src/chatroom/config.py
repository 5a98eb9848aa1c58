from __future__ import annotations

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # postgres
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300
    DB_CREATE_ALL: bool = True

    # registration drafts live here
    REDIS_URL: str = "redis://localhost:6379/0"

    # signed session cookie
    SESSION_SECRET: str = Field(min_length=32)
    SESSION_ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "chatroom_session"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_TTL_SECONDS: int = 600

    REGISTRATION_COOKIE_NAME: str = "chatroom_registration"
    REGISTRATION_DRAFT_TTL_SECONDS: int = 30
    REGISTRATION_KEY_PREFIX: str = "chatroom:registration:"

    BCRYPT_ROUNDS: int = Field(default=10, ge=4, le=31)

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
