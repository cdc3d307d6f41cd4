"""
Main settings object.
"""

from datetime import timedelta
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import URL

from .managers import AsyncSessionManager, SyncSessionManager


class Settings(BaseSettings):
    database_type: Literal["sqlite", "postgres"] = "sqlite"
    database_user: str | None = None
    database_password: str | None = None
    database_port: int | None = None
    database_host: str | None = None
    database_db: str = "agora.db"

    database_echo: bool = False

    # Tokens are HMAC-signed, so this secret is all that is needed to both
    # issue and verify them.
    token_secret: str = "CHANGEME"
    token_algorithm: str = "HS256"
    token_expiry: timedelta | None = None

    page_size: int = 10
    group_list_length: int = 5

    # Production setup
    hostname: str = "0.0.0.0"
    port: int = 3001
    cors_origins: list[str] = ["http://localhost:3000"]
    create_tables: bool = False

    model_config = SettingsConfigDict(env_prefix="AGORA_", env_file=".env")

    @property
    def sync_driver(self) -> str:
        match self.database_type:
            case "sqlite":
                return "sqlite"
            case "postgres":
                return "postgresql+psycopg"
            case _:
                raise ValueError

    @property
    def async_driver(self) -> str:
        match self.database_type:
            case "sqlite":
                return "sqlite+aiosqlite"
            case "postgres":
                return "postgresql+asyncpg"
            case _:
                raise ValueError

    def _uri(self, drivername: str) -> URL:
        return URL.create(
            drivername=drivername,
            username=self.database_user,
            password=self.database_password,
            host=self.database_host,
            port=self.database_port,
            database=self.database_db,
        )

    @property
    def sync_uri(self) -> URL:
        return self._uri(self.sync_driver)

    @property
    def async_uri(self) -> URL:
        return self._uri(self.async_driver)

    def sync_manager(self) -> SyncSessionManager:
        return SyncSessionManager(connection_url=self.sync_uri, echo=self.database_echo)

    def async_manager(self) -> AsyncSessionManager:
        return AsyncSessionManager(
            connection_url=self.async_uri, echo=self.database_echo
        )
