from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    BASE_URL: str = "http://localhost:8000"
    EMAIL: str = ""
    PASSWORD: str = ""
    FIRST_NAME: str = ""
    LAST_NAME: str = ""
    POLL_INTERVAL: float = 10.0
    TIMEOUT: float = 10.0

    model_config = ConfigDict(
        env_prefix="CHATROOM_",
        env_file=".env",
        extra="ignore",
    )
