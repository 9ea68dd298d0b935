"""
School Repository

Loads institutional statistics for every school in the catalog and converts
them into the scoring layer's read-only SchoolData snapshots.
"""

import logging
from decimal import Decimal
from typing import List, Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chances.domain.scoring.interfaces import GpaDistribution, SchoolData
from chances.infrastructure.db.models.school import School
from chances.infrastructure.db.repositories.base_repository import BaseRepository
from chances.infrastructure.exceptions import DatabaseError


logger = logging.getLogger(__name__)


def _to_float(value: Optional[Union[Decimal, float, int]]) -> Optional[float]:
    """Numeric columns arrive as Decimal; the scoring layer works in floats."""
    return float(value) if value is not None else None


def school_to_data(school: School) -> SchoolData:
    """Map an ORM row to the scoring snapshot."""
    school_type = school.school_type
    if school_type is not None and hasattr(school_type, "value"):
        school_type = school_type.value

    return SchoolData(
        id=str(school.id),
        name=school.name,
        slug=school.slug,
        state=school.state,
        city=school.city,
        school_type=school_type,
        acceptance_rate=_to_float(school.acceptance_rate),
        sat_average=school.sat_average,
        sat_25th=school.sat_25th_percentile,
        sat_75th=school.sat_75th_percentile,
        act_median=school.act_median,
        act_25th=school.act_25th_percentile,
        act_75th=school.act_75th_percentile,
        gpa_distribution=GpaDistribution(
            percent_400=_to_float(school.gpa_percent_400),
            percent_375_399=_to_float(school.gpa_percent_375_to_399),
            percent_350_374=_to_float(school.gpa_percent_350_to_374),
            percent_325_349=_to_float(school.gpa_percent_325_to_349),
            percent_300_324=_to_float(school.gpa_percent_300_to_324),
            percent_below_300=_to_float(school.gpa_percent_below_300),
        ),
    )


class SchoolRepository(BaseRepository[School]):
    """Repository for school institutional data."""

    def __init__(self, session: AsyncSession):
        super().__init__(School, session)

    async def get_all_for_chances(self) -> List[SchoolData]:
        """
        Fetch every school with the statistics the calculator needs.

        Returns:
            SchoolData snapshots ordered by name

        Raises:
            DatabaseError: If the query fails
        """
        stmt = select(School).order_by(School.name)
        try:
            result = await self._session.execute(stmt)
            schools = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"[CHANCES] Failed to load schools: {e}")
            raise DatabaseError(
                "Failed to load schools",
                operation="select",
                table="schools",
                original_error=e,
            ) from e

        return [school_to_data(school) for school in schools]
