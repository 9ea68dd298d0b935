"""
Test configuration and fixtures for the Chances Calculator.

Provides shared fixtures for unit and integration tests.
"""

import os

# Settings are read at import time; configure before any chances import.
os.environ["SUPABASE_URL"] = "https://test-project.supabase.co"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret-for-unit-tests-only-0123456789"
os.environ["ENVIRONMENT"] = "testing"
os.environ.pop("DATABASE_URL", None)

import pytest
from fastapi.testclient import TestClient

from chances.domain.scoring.interfaces import (
    GpaDistribution,
    SchoolData,
    SimilarProfileStats,
    StudentProfile,
)


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def app():
    """Get the FastAPI application."""
    from chances.main import app
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Get synchronous test client."""
    return TestClient(app, raise_server_exceptions=False)


# =============================================================================
# Sample Data Fixtures
# =============================================================================

def make_school(school_id: str = "school-1", name: str = "Sample University", **overrides) -> SchoolData:
    """SchoolData with every statistic missing unless overridden."""
    return SchoolData(id=school_id, name=name, **overrides)


def make_peers(school_id: str = "school-1", total: int = 10, accepted: int = 5, **overrides) -> SimilarProfileStats:
    """Peer-cohort counts; rejected defaults to the remainder."""
    overrides.setdefault("rejected", total - accepted)
    return SimilarProfileStats(
        school_id=school_id,
        total_similar=total,
        accepted=accepted,
        **overrides,
    )


@pytest.fixture
def school_factory():
    return make_school


@pytest.fixture
def peer_factory():
    return make_peers


@pytest.fixture
def strong_student():
    """Student with strong stats: 3.9 GPA, 1520 SAT."""
    return StudentProfile(
        state_of_residence="CA",
        gpa_unweighted=3.9,
        sat_score=1520,
        intended_major="Computer Science",
    )


@pytest.fixture
def sat_only_student():
    """Student who reports only an SAT score."""
    return StudentProfile(state_of_residence="TX", sat_score=1400)


@pytest.fixture
def empty_student():
    """Student with no GPA, SAT or ACT."""
    return StudentProfile(state_of_residence="NY")


@pytest.fixture
def ivy():
    """Hyper-selective school (8% acceptance rate)."""
    return make_school(
        "ivy",
        "Ivy University",
        acceptance_rate=8.0,
        sat_25th=1500,
        sat_75th=1570,
        act_25th=34,
        act_75th=35,
        gpa_distribution=GpaDistribution(
            percent_400=60.0,
            percent_375_399=30.0,
            percent_350_374=8.0,
            percent_325_349=2.0,
        ),
    )


@pytest.fixture
def state_school():
    """Moderately selective public university (65% acceptance rate)."""
    return make_school(
        "state",
        "State University",
        acceptance_rate=65.0,
        sat_25th=1200,
        sat_75th=1400,
        school_type="public",
        state="CA",
    )


@pytest.fixture
def unknown_school():
    """School that publishes nothing."""
    return make_school("unknown", "Unknown College")
