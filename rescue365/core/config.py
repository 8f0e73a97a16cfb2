"""
Rescue365 - Configuration Management
Centralized configuration using pydantic-settings.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Supabase (hosted report table and auth)
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    reports_table: str = "rescue_reports"

    # SQL database (used when Supabase is not configured)
    database_url: str = "sqlite:///./rescue365.db"

    # Remote calls
    store_timeout_seconds: float = 30.0

    # OAuth
    oauth_provider: str = "google"
    oauth_redirect_url: str = "rescue365://auth/callback"

    # Reverse geocoding (OpenStreetMap Nominatim)
    geocoder_url: str = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "rescue365/1.0"

    # Routing
    rescue_radius_miles: float = 10.0
    transition_policy: str = "any"  # any, forward_only

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def rescue_radius_meters(self) -> float:
        from rescue365.core.constants import METERS_PER_MILE

        return self.rescue_radius_miles * METERS_PER_MILE


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
