import os

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_files() -> tuple[str, ...]:
    env = os.getenv("APP_ENV", "development")
    return (".env", f".env.{env}")


class Settings(BaseSettings):
    # App
    app_name: str = "cashier-api"
    app_version: str = "1.0.0"
    app_env: str = "development"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./cashier.db"
    db_pool_size: int = 25
    db_max_overflow: int = 5
    db_echo: bool = False

    # How long a checkout waits on a locked product row before giving up
    lock_timeout_ms: int = 5000

    # Auth (empty disables the X-API-Key check)
    api_key: str = ""

    model_config = SettingsConfigDict(
        env_file=_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def check_production(self) -> "Settings":
        if self.app_env == "production" and not self.api_key:
            raise ValueError("API_KEY is required for production")
        if self.lock_timeout_ms <= 0:
            raise ValueError("LOCK_TIMEOUT_MS must be positive")
        return self

    @property
    def database_type(self) -> str:
        """Backend name taken from the URL scheme, e.g. 'postgresql' or 'sqlite'."""
        return self.database_url.split(":", 1)[0].split("+", 1)[0]
