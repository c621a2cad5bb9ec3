from functools import lru_cache
from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Security
    secret_key: str = Field(min_length=32, description="Secret key for session token signing")

    # Session
    session_expiry_days: int = Field(default=7, ge=1, description="Session token lifetime in days")
    session_cookie_name: str = Field(default="token")
    cookie_secure: bool = Field(default=True, description="Send the session cookie over HTTPS only")

    # Database
    db_path: str = Field(default="./data/taskboard.db", description="Path to SQLite database file")
    database_url: str | None = Field(
        default=None,
        description="Full async SQLAlchemy URL; overrides db_path when set",
    )

    # Network
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=4000)

    # Realtime
    realtime_queue_size: int = Field(
        default=100,
        ge=1,
        description="Pending events kept per connection before new ones are dropped",
    )

    # App
    app_name: str = Field(default="Taskboard")
    debug: bool = Field(default=False)
    log_file: str | None = Field(default="logs/app.log", description="Rotated log file; empty disables it")

    @computed_field
    @property
    def db_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.db_path}"

    @computed_field
    @property
    def db_directory(self) -> Path:
        return Path(self.db_path).parent

    @computed_field
    @property
    def session_expiry_seconds(self) -> int:
        return self.session_expiry_days * 24 * 3600


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore
