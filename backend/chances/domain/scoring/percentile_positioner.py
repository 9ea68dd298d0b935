"""
Percentile Positioner

Combines the available stat axes into one overall position.
Implements dynamic averaging when the student or the school lacks an axis.
"""

from typing import Dict, List, Optional

from chances.domain.scoring.interfaces import (
    ClassifierConstants,
    PositionAxis,
    PositionBreakdown,
    SchoolData,
    StudentProfile,
)
from chances.domain.scoring.axes import (
    ActAxis,
    GpaDistributionAxis,
    SatAxis,
)


class PercentilePositioner:
    """
    Student position relative to a school's admitted/enrolled students.

    Uses Strategy pattern for pluggable axes. The overall position is the
    unweighted mean of every axis that both sides provide.
    """

    def __init__(
        self,
        axes: Optional[List[PositionAxis]] = None,
        constants: Optional[ClassifierConstants] = None,
    ):
        """
        Initialize positioner with axes.

        Args:
            axes: List of stat axes. If None, uses GPA, SAT and ACT.
            constants: Engine constants (fallback widths for test ranges).
        """
        self._constants = constants or ClassifierConstants()
        self._axes = axes or self._default_axes()

    def _default_axes(self) -> List[PositionAxis]:
        return [
            GpaDistributionAxis(),
            SatAxis(fallback_width=self._constants.sat_fallback_width),
            ActAxis(fallback_width=self._constants.act_fallback_width),
        ]

    def position(
        self,
        profile: StudentProfile,
        school: SchoolData,
    ) -> PositionBreakdown:
        """
        Compute per-axis and overall positions.

        Returns:
            PositionBreakdown with overall=None when no axis is available.
        """
        axis_positions: Dict[str, Optional[float]] = {
            axis.name: axis.position(profile, school)
            for axis in self._axes
        }

        available = [value for value in axis_positions.values() if value is not None]
        overall = sum(available) / len(available) if available else None

        return PositionBreakdown(
            gpa=axis_positions.get("gpa"),
            sat=axis_positions.get("sat"),
            act=axis_positions.get("act"),
            overall=overall,
        )
