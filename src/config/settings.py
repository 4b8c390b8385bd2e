from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./herdcycle.db"
    log_level: str = "INFO"
    environment: str = "dev"
    # Set by the upstream auth gateway
    user_header: str = "X-User-ID"
    # CORS
    cors_allow_origins: str = "*"
    # Reproduction constants (days). None means "not configured".
    pd_check_offset_days: int | None = 55
    gestation_days: int | None = 280
    heat_check_offset_days: int | None = 21
    calving_grace_days: int | None = 14
    fresh_window_days: int | None = 48
    heat_detection_window_days: int | None = 365
    post_pd_treatment_days: int | None = 29
    reopen_after_negative_pd_days: int | None = 60
    # Reconciliation
    notification_lookahead_days: int = 7
    reconcile_interval_minutes: int = 60  # 0 disables the periodic job
    scheduler_enabled: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("database_url")
    @classmethod
    def ensure_asyncpg_scheme(cls, value: str) -> str:
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql+asyncpg://", 1)
        if value.startswith("postgresql://") and "+" not in value.split("://", 1)[0]:
            return value.replace("postgresql://", "postgresql+asyncpg://", 1)
        return value

    @field_validator("notification_lookahead_days", "reconcile_interval_minutes")
    @classmethod
    def non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must be >= 0")
        return value

    @property
    def cors_allow_origins_list(self) -> list[str]:
        """Convert cors_allow_origins string to list"""
        if isinstance(self.cors_allow_origins, str):
            return [v.strip() for v in self.cors_allow_origins.split(",") if v.strip()]
        return self.cors_allow_origins


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
