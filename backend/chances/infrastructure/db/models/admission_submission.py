"""
Admission Submission Model

Self-reported application outcomes. Visible submissions form the
peer-cohort corpus for the chances calculator.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from chances.infrastructure.db.models.base import TimestampMixin, UUIDMixin


class AdmissionDecision(str, Enum):
    """Possible admission outcomes."""
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WAITLISTED = "waitlisted"
    DEFERRED = "deferred"


class ApplicationRound(str, Enum):
    """Round the application was filed in."""
    EARLY_DECISION = "early_decision"
    EARLY_ACTION = "early_action"
    REGULAR = "regular"
    ROLLING = "rolling"


class SubmissionStatus(str, Enum):
    """Moderation status. Only visible (or aged pending) rows are used."""
    PENDING_REVIEW = "pending_review"
    VISIBLE = "visible"
    HIDDEN = "hidden"
    FLAGGED = "flagged"


class AdmissionSubmissionBase(SQLModel):
    """Base schema for admission submissions."""

    user_id: UUID = Field(..., index=True, description="Submitting user")
    school_id: UUID = Field(..., foreign_key="schools.id", index=True)
    admission_cycle: str = Field(
        ...,
        max_length=9,
        description="Cycle in YYYY-YYYY format"
    )
    decision: AdmissionDecision = Field(..., sa_type=sa.String(20))
    application_round: ApplicationRound = Field(..., sa_type=sa.String(20))

    gpa_unweighted: Optional[Decimal] = Field(
        default=None, max_digits=4, decimal_places=2, ge=0, le=4
    )
    gpa_weighted: Optional[Decimal] = Field(
        default=None, max_digits=4, decimal_places=2, ge=0, le=5
    )
    sat_score: Optional[int] = Field(default=None, ge=400, le=1600)
    act_score: Optional[int] = Field(default=None, ge=1, le=36)
    intended_major: Optional[str] = Field(default=None, max_length=100)
    state_of_residence: str = Field(..., max_length=2)

    submission_status: SubmissionStatus = Field(
        default=SubmissionStatus.PENDING_REVIEW,
        sa_type=sa.String(20),
        index=True,
    )
    flag_count: int = Field(default=0, ge=0)


class AdmissionSubmission(AdmissionSubmissionBase, UUIDMixin, TimestampMixin, table=True):
    """Admission submissions table."""

    __tablename__ = "admission_submissions"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "school_id", "admission_cycle",
            name="unique_user_school_cycle",
        ),
    )
