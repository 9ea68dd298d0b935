"""
School SQLModel for the Chances Calculator

Institutional statistics from College Scorecard and the Common Data Set.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from chances.infrastructure.db.models.base import UUIDMixin


class SchoolType(str, Enum):
    """Institution control/level."""
    PUBLIC = "public"
    PRIVATE = "private"
    COMMUNITY_COLLEGE = "community_college"


class SchoolBase(SQLModel):
    """Base schema for School model."""

    name: str = Field(..., max_length=255, index=True, description="School name")
    slug: Optional[str] = Field(
        default=None,
        max_length=255,
        unique=True,
        description="URL slug"
    )
    state: str = Field(..., max_length=2, description="2-letter state code")
    city: str = Field(..., max_length=100)
    school_type: SchoolType = Field(..., sa_type=sa.String(32))

    # Admission statistics
    acceptance_rate: Optional[Decimal] = Field(
        default=None,
        max_digits=5, decimal_places=2,
        ge=0, le=100,
        description="Acceptance rate as a percentage (0-100)"
    )
    sat_average: Optional[int] = Field(default=None, ge=400, le=1600)
    sat_25th_percentile: Optional[int] = Field(default=None, ge=400, le=1600)
    sat_75th_percentile: Optional[int] = Field(default=None, ge=400, le=1600)
    act_median: Optional[int] = Field(default=None, ge=1, le=36)
    act_25th_percentile: Optional[int] = Field(default=None, ge=1, le=36)
    act_75th_percentile: Optional[int] = Field(default=None, ge=1, le=36)

    # CDS C11: percent of enrolled freshmen per unweighted GPA band
    gpa_percent_400: Optional[Decimal] = Field(default=None, max_digits=5, decimal_places=2)
    gpa_percent_375_to_399: Optional[Decimal] = Field(default=None, max_digits=5, decimal_places=2)
    gpa_percent_350_to_374: Optional[Decimal] = Field(default=None, max_digits=5, decimal_places=2)
    gpa_percent_325_to_349: Optional[Decimal] = Field(default=None, max_digits=5, decimal_places=2)
    gpa_percent_300_to_324: Optional[Decimal] = Field(default=None, max_digits=5, decimal_places=2)
    gpa_percent_below_300: Optional[Decimal] = Field(default=None, max_digits=5, decimal_places=2)


class School(SchoolBase, UUIDMixin, table=True):
    """Schools table."""

    __tablename__ = "schools"

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=sa.DateTime(timezone=True),
        nullable=False,
    )
