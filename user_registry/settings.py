from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Local dev: load from .env automatically.
    # In production: inject real env vars instead.
    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    # Env vars:
    # - ADMIN_USERNAME / ADMIN_PASSWORD: seed administrator created by bootstrap_admin()
    # - BCRYPT_ROUNDS (optional): bcrypt cost factor for new hashes
    # - LOG_LEVEL (optional)
    admin_username: str = Field(default="admin01", min_length=1, validation_alias="ADMIN_USERNAME")
    admin_password: str = Field(default="AdminPass203901", min_length=1, validation_alias="ADMIN_PASSWORD")

    # bcrypt accepts 4..31. 10 matches the library default most deployments ship with.
    bcrypt_rounds: int = Field(default=10, ge=4, le=31, validation_alias="BCRYPT_ROUNDS")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    def model_post_init(self, __context):  # type: ignore[override]
        self.admin_username = self.admin_username.strip()
        self.log_level = (self.log_level or "INFO").upper().strip()


def get_settings() -> Settings:
    """Load settings from environment.

    Keep this as the single canonical constructor for Settings(). Tests can
    monkeypatch env vars or this function.
    """
    return Settings()
