"""
Unit tests for Pydantic Settings configuration.

Tests defaults, environment loading and validation of engine tunables.
"""

import pytest
from pydantic import ValidationError

from chances.config.settings import Settings


class TestSettings:
    """Tests for Settings configuration."""

    def test_settings_loads_from_env(self):
        """Settings should load from environment variables."""
        from chances.config.settings import settings

        assert settings.supabase_url == "https://test-project.supabase.co"
        assert settings.supabase_jwt_secret is not None
        assert settings.database_url is None

    def test_settings_has_defaults(self):
        """Settings should have sensible defaults."""
        settings = Settings()

        assert settings.institutional_cache_ttl_seconds == 3600
        assert settings.peer_cohort_cache_ttl_seconds == 1800
        assert settings.peer_gpa_tolerance == pytest.approx(0.15)
        assert settings.peer_sat_tolerance == 80
        assert settings.chances_min_confident_sample == 8
        assert settings.chances_probability_floor == pytest.approx(0.01)
        assert settings.chances_probability_ceiling == pytest.approx(0.99)
        assert settings.chances_sat_fallback_width == pytest.approx(80.0)
        assert settings.chances_fetch_timeout_seconds > 0

    def test_environment_properties(self):
        """The test run is neither production nor development."""
        settings = Settings()

        assert settings.environment == "testing"
        assert settings.is_production is False
        assert settings.is_development is False
        assert Settings(environment="Production").is_production is True

    def test_allowed_origins_includes_localhost(self):
        assert "http://localhost:3000" in Settings().allowed_origins

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("CHANCES_GLOBAL_PRIOR", "0.2")
        monkeypatch.setenv("PEER_SAT_TOLERANCE", "60")

        settings = Settings()

        assert settings.chances_global_prior == pytest.approx(0.2)
        assert settings.peer_sat_tolerance == 60


class TestTunableValidation:
    """Engine constants that would break tier ordering are rejected."""

    def test_reach_must_be_below_safety(self):
        with pytest.raises(ValidationError):
            Settings(chances_reach_threshold=0.6, chances_safety_threshold=0.6)

    def test_min_sample_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(chances_min_confident_sample=0)

    @pytest.mark.parametrize("prior", [0.0, 1.0])
    def test_prior_must_be_open_interval(self, prior):
        with pytest.raises(ValidationError):
            Settings(chances_global_prior=prior)

    def test_adjustment_scale_bounds(self):
        with pytest.raises(ValidationError):
            Settings(chances_adjustment_scale=1.5)

    @pytest.mark.parametrize(
        "floor, ceiling",
        [(0.5, 0.5), (0.6, 0.4), (-0.1, 0.9), (0.1, 1.2)],
    )
    def test_probability_floor_below_ceiling(self, floor, ceiling):
        with pytest.raises(ValidationError):
            Settings(chances_probability_floor=floor, chances_probability_ceiling=ceiling)

    def test_fallback_widths_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(chances_sat_fallback_width=0)
        with pytest.raises(ValidationError):
            Settings(chances_act_fallback_width=-1)
