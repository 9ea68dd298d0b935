"""
SQLModel ORM Models for the Chances Calculator

Exports all database models for Alembic autogenerate and application use.
Import models here to register them with SQLModel.metadata.
"""

from chances.infrastructure.db.models.base import (
    TimestampMixin,
    UUIDMixin,
)
from chances.infrastructure.db.models.school import (
    School,
    SchoolBase,
    SchoolType,
)
from chances.infrastructure.db.models.admission_submission import (
    AdmissionSubmission,
    AdmissionSubmissionBase,
    AdmissionDecision,
    ApplicationRound,
    SubmissionStatus,
)


__all__ = [
    # Base
    "TimestampMixin",
    "UUIDMixin",
    # School
    "School",
    "SchoolBase",
    "SchoolType",
    # Submissions
    "AdmissionSubmission",
    "AdmissionSubmissionBase",
    "AdmissionDecision",
    "ApplicationRound",
    "SubmissionStatus",
]
