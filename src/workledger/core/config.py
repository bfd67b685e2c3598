"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class StoreConfig(BaseSettings):
    """Redis store configuration."""

    model_config = {"env_prefix": "WORKLEDGER_STORE_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    credential: str | None = None  # plain credential, hashed before AUTH
    socket_timeout: float | None = 5.0

    @property
    def endpoint(self) -> str:
        return f"{self.host}:{self.port}"


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "WORKLEDGER_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    store: StoreConfig = StoreConfig()
