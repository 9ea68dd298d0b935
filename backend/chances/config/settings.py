"""
Application Settings for the Chances Calculator

Centralized configuration using Pydantic Settings with .env support.
All environment variables are validated at startup.
"""

from functools import lru_cache
from typing import Optional
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Engine tunables (CHANCES_*) are heuristic defaults; tune them against
    real outcome data before changing what users see.
    """

    # Supabase Auth Configuration
    supabase_url: Optional[str] = None
    supabase_jwt_secret: Optional[str] = None

    # Application Settings
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # CORS Configuration
    frontend_url: str = "http://localhost:3000"
    allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Database Configuration (SQLModel/SQLAlchemy)
    database_url: Optional[str] = None
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_pool_timeout: int = 30
    database_echo: bool = False

    # Caching
    institutional_cache_ttl_seconds: int = 3600
    peer_cohort_cache_ttl_seconds: int = 1800
    peer_cohort_cache_max_entries: int = 2048

    # Peer matching tolerance windows
    peer_gpa_tolerance: float = 0.15
    peer_sat_tolerance: int = 80
    peer_act_tolerance: int = 3
    pending_review_delay_hours: int = 2

    # Chances engine tunables
    chances_adjustment_scale: float = 0.25
    chances_min_confident_sample: int = 8
    chances_global_prior: float = 0.30
    chances_probability_floor: float = 0.01
    chances_probability_ceiling: float = 0.99
    chances_reach_threshold: float = 0.25
    chances_safety_threshold: float = 0.60
    chances_far_reach_acceptance_rate: float = 10.0
    chances_far_reach_probability: float = 0.40
    chances_min_display_confidence: float = 0.15
    chances_sat_fallback_width: float = 80.0
    chances_act_fallback_width: float = 3.0

    # Request handling
    chances_fetch_timeout_seconds: float = 10.0
    chances_max_results_per_tier: int = 50

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_chances_tunables(self) -> "Settings":
        """Reject engine constants that would break tier ordering."""
        if not 0.0 < self.chances_reach_threshold < self.chances_safety_threshold <= 1.0:
            raise ValueError(
                "CHANCES_REACH_THRESHOLD must be positive and below "
                "CHANCES_SAFETY_THRESHOLD (<= 1.0)"
            )

        if self.chances_min_confident_sample < 1:
            raise ValueError("CHANCES_MIN_CONFIDENT_SAMPLE must be at least 1")

        if not 0.0 <= self.chances_adjustment_scale <= 1.0:
            raise ValueError("CHANCES_ADJUSTMENT_SCALE must be between 0 and 1")

        if not 0.0 < self.chances_global_prior < 1.0:
            raise ValueError("CHANCES_GLOBAL_PRIOR must be between 0 and 1")

        if not 0.0 <= self.chances_min_display_confidence <= 1.0:
            raise ValueError("CHANCES_MIN_DISPLAY_CONFIDENCE must be between 0 and 1")

        if not 0.0 <= self.chances_probability_floor < self.chances_probability_ceiling <= 1.0:
            raise ValueError(
                "CHANCES_PROBABILITY_FLOOR must be below CHANCES_PROBABILITY_CEILING, "
                "both within 0 and 1"
            )

        if self.chances_sat_fallback_width <= 0 or self.chances_act_fallback_width <= 0:
            raise ValueError("CHANCES_*_FALLBACK_WIDTH must be positive")

        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience export for direct import
settings = get_settings()
