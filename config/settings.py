"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Layout margins and tie-break thresholds are configured here.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SUPABASE
    # ===================
    supabase_url: str = Field(
        ...,
        description="Supabase project URL"
    )
    supabase_key: str = Field(
        ...,
        description="Supabase anon/public key"
    )
    supabase_service_key: Optional[str] = Field(
        None,
        description="Supabase service role key (for admin operations)"
    )

    # ===================
    # LAYOUT MARGINS (mm)
    # ===================
    layout_bleed_mm: float = Field(
        default=2,
        ge=0,
        le=20,
        description="Trim-edge allowance around the layout"
    )
    layout_gap_mm: float = Field(
        default=2,
        ge=0,
        le=20,
        description="Spacing between adjacent items"
    )
    layout_gripper_mm: float = Field(
        default=5,
        ge=0,
        le=50,
        description="Press grip exclusion, applied to sheet width only"
    )
    layout_safety_margin_mm: float = Field(
        default=3,
        ge=0,
        le=20,
        description="Extra allowance when checking the layout footprint"
    )

    # ===================
    # LAYOUT TIE-BREAK
    # ===================
    layout_tie_break_max_item_loss: int = Field(
        default=4,
        ge=0,
        le=50,
        description="Max items given up to prefer the rotated layout"
    )
    layout_tie_break_min_clearance_mm: float = Field(
        default=15,
        ge=0,
        le=100,
        description="Leftover space below which the unrotated layout counts as tight"
    )

    # ===================
    # COMPATIBILITY
    # ===================
    compatibility_default_top_n: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Number of ranked materials returned by default"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
