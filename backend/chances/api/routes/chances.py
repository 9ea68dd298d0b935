"""
Chances Routes

GET /api/chances: estimates the requester's admission chances at every
school and groups them into Safety / Target / Reach / Far Reach tiers.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from chances.api.dependencies import ChancesServiceDep, CurrentUserDep
from chances.domain.scoring import StudentProfile
from chances.infrastructure.exceptions import (
    ChancesError,
    ConfigurationError,
    DatabaseError,
    ValidationError,
)


logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Input Validation
# ============================================================================

US_STATE_CODES = frozenset({
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "DC", "FL",
    "GA", "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME",
    "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH",
    "NJ", "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI",
    "SC", "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI",
    "WY",
})

MAX_INTENDED_MAJOR_LENGTH = 100
ADMISSION_CYCLE_PATTERN = re.compile(r"^\d{4}-\d{4}$")
CACHE_CONTROL = "private, s-maxage=300"
CALCULATION_FAILED_MESSAGE = "Failed to calculate chances. Please try again."


@dataclass(frozen=True)
class ChancesInput:
    """Validated query parameters."""
    profile: StudentProfile
    admission_cycle: Optional[str] = None


def _blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def _parse_number(value: str, cast):
    try:
        return cast(value.strip())
    except ValueError:
        return None


def validate_chances_input(
    gpa: Optional[str] = None,
    sat: Optional[str] = None,
    act: Optional[str] = None,
    state: Optional[str] = None,
    major: Optional[str] = None,
    ap: Optional[str] = None,
    cycle: Optional[str] = None,
) -> ChancesInput:
    """
    Validate raw query strings, collecting every error before failing.

    Empty strings count as absent.

    Raises:
        ValidationError: With one {"field", "message"} entry per problem
    """
    errors: List[Dict[str, str]] = []

    gpa_value: Optional[float] = None
    if not _blank(gpa):
        gpa_value = _parse_number(gpa, float)
        if gpa_value is None or not 0.0 <= gpa_value <= 4.0:
            errors.append({
                "field": "gpaUnweighted",
                "message": "GPA must be between 0.00 and 4.00",
            })
            gpa_value = None

    sat_value: Optional[int] = None
    if not _blank(sat):
        sat_value = _parse_number(sat, int)
        if sat_value is None or not 400 <= sat_value <= 1600:
            errors.append({
                "field": "satScore",
                "message": "SAT score must be between 400 and 1600",
            })
            sat_value = None

    act_value: Optional[int] = None
    if not _blank(act):
        act_value = _parse_number(act, int)
        if act_value is None or not 1 <= act_value <= 36:
            errors.append({
                "field": "actScore",
                "message": "ACT score must be between 1 and 36",
            })
            act_value = None

    if gpa_value is None and sat_value is None and act_value is None and not errors:
        errors.append({
            "field": "stats",
            "message": "At least one of GPA, SAT score, or ACT score is required",
        })

    state_value = (state or "").strip().upper()
    if state_value not in US_STATE_CODES:
        errors.append({
            "field": "stateOfResidence",
            "message": "A valid 2-letter US state code is required",
        })

    major_value = (major or "").strip() or None
    if major_value and len(major_value) > MAX_INTENDED_MAJOR_LENGTH:
        errors.append({
            "field": "intendedMajor",
            "message": (
                f"Intended major must be {MAX_INTENDED_MAJOR_LENGTH} characters or less"
            ),
        })

    cycle_value = (cycle or "").strip() or None
    if cycle_value and not ADMISSION_CYCLE_PATTERN.match(cycle_value):
        errors.append({
            "field": "admissionCycle",
            "message": "Admission cycle must be in YYYY-YYYY format (e.g., 2025-2026)",
        })

    ap_value: Optional[int] = None
    if not _blank(ap):
        ap_value = _parse_number(ap, int)
        if ap_value is None or not 0 <= ap_value <= 30:
            errors.append({
                "field": "apCoursesCount",
                "message": "AP courses count must be between 0 and 30",
            })
            ap_value = None

    if errors:
        raise ValidationError(errors=errors)

    return ChancesInput(
        profile=StudentProfile(
            state_of_residence=state_value,
            gpa_unweighted=gpa_value,
            sat_score=sat_value,
            act_score=act_value,
            intended_major=major_value,
            ap_courses_count=ap_value,
        ),
        admission_cycle=cycle_value,
    )


# ============================================================================
# Endpoints
# ============================================================================

@router.get("/chances")
async def calculate_chances(
    user_id: CurrentUserDep,
    service: ChancesServiceDep,
    gpa: Optional[str] = Query(None, description="Unweighted GPA, 0.00-4.00"),
    sat: Optional[str] = Query(None, description="SAT total, 400-1600"),
    act: Optional[str] = Query(None, description="ACT composite, 1-36"),
    state: Optional[str] = Query(None, description="2-letter state of residence"),
    major: Optional[str] = Query(None, description="Intended major"),
    ap: Optional[str] = Query(None, description="Number of AP courses, 0-30"),
    cycle: Optional[str] = Query(None, description="Admission cycle, YYYY-YYYY"),
):
    """Estimate admission chances at every school, grouped by tier."""
    data = validate_chances_input(
        gpa=gpa, sat=sat, act=act, state=state, major=major, ap=ap, cycle=cycle,
    )

    try:
        response = await service.calculate(
            data.profile,
            admission_cycle=data.admission_cycle,
            user_id=user_id,
        )
    except (DatabaseError, ConfigurationError) as e:
        logger.error(f"[CHANCES] calculation failed: {e.message}")
        raise ChancesError(CALCULATION_FAILED_MESSAGE, original_error=e) from e

    return JSONResponse(
        content=response.to_dict(),
        headers={"Cache-Control": CACHE_CONTROL},
    )
