"""
Test Score Axes (SAT / ACT)

Positions a standardized-test score against a school's 25th-75th
percentile range of admitted students.
"""

from abc import abstractmethod
from typing import Optional, Tuple

from chances.domain.scoring.interfaces import (
    BasePositionAxis,
    StudentProfile,
    SchoolData,
    clamp,
)


class ScoreRangeAxis(BasePositionAxis):
    """
    Piecewise-linear position of a test score.

    Returns a value in [-1, 1] where:
    - below the 25th percentile: negative, one interquartile width below
      the 25th percentile reaches -1
    - 25th to 75th percentile: scales linearly from 0 to 1
    - above the 75th percentile: +1 (capped)
    """

    def __init__(self, fallback_width: float):
        # Width used when a school reports p25 == p75
        self._fallback_width = fallback_width

    @abstractmethod
    def student_score(self, profile: StudentProfile) -> Optional[int]:
        pass

    @abstractmethod
    def school_range(
        self, school: SchoolData
    ) -> Tuple[Optional[int], Optional[int]]:
        pass

    def position(
        self,
        profile: StudentProfile,
        school: SchoolData,
    ) -> Optional[float]:
        score = self.student_score(profile)
        p25, p75 = self.school_range(school)

        if score is None or p25 is None or p75 is None:
            return None

        # Some sources swap the percentiles
        low, high = min(p25, p75), max(p25, p75)
        return self.score_position(score, low, high)

    def score_position(self, score: float, p25: float, p75: float) -> float:
        """Map a score to [-1, 1] given the school's interquartile range."""
        width = p75 - p25
        if width <= 0:
            width = self._fallback_width

        if score < p25:
            return clamp(-(p25 - score) / width, -1.0, 0.0)

        if score >= p75:
            return 1.0

        return clamp((score - p25) / (p75 - p25), 0.0, 1.0)


class SatAxis(ScoreRangeAxis):
    """SAT composite (400-1600)."""

    def __init__(self, fallback_width: float = 80.0):
        super().__init__(fallback_width)

    @property
    def name(self) -> str:
        return "sat"

    def student_score(self, profile: StudentProfile) -> Optional[int]:
        return profile.sat_score

    def school_range(
        self, school: SchoolData
    ) -> Tuple[Optional[int], Optional[int]]:
        return school.sat_25th, school.sat_75th


class ActAxis(ScoreRangeAxis):
    """ACT composite (1-36)."""

    def __init__(self, fallback_width: float = 3.0):
        super().__init__(fallback_width)

    @property
    def name(self) -> str:
        return "act"

    def student_score(self, profile: StudentProfile) -> Optional[int]:
        return profile.act_score

    def school_range(
        self, school: SchoolData
    ) -> Tuple[Optional[int], Optional[int]]:
        return school.act_25th, school.act_75th
