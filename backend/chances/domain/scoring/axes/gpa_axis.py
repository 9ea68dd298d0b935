"""
GPA Distribution Axis

Positions the student's unweighted GPA inside the school's enrolled-freshman
GPA histogram (Common Data Set section C11).

The histogram has six bands. The student's percentile is the share of
enrolled students below their GPA, interpolated inside their own band.
More enrolled students at or above the student means a weaker position;
being in a rarer, higher band means a stronger one.
"""

from typing import Optional

from chances.domain.scoring.interfaces import (
    BasePositionAxis,
    StudentProfile,
    SchoolData,
    clamp,
)


# (lower bound, upper bound) of the five interval bands, lowest first.
# The sixth band is the 4.00 point mass.
GPA_BAND_BOUNDS = (
    (0.0, 3.0),
    (3.0, 3.25),
    (3.25, 3.5),
    (3.5, 3.75),
    (3.75, 4.0),
)
PERFECT_GPA = 4.0


class GpaDistributionAxis(BasePositionAxis):
    """
    GPA position from the school's GPA band percentages.

    Returns a value in [-1, 1]:
    - -1 = below every enrolled student
    -  0 = at the enrolled median
    - +1 = above every enrolled student
    """

    @property
    def name(self) -> str:
        return "gpa"

    def position(
        self,
        profile: StudentProfile,
        school: SchoolData,
    ) -> Optional[float]:
        if profile.gpa_unweighted is None:
            return None

        percentile = self.enrolled_percentile(profile.gpa_unweighted, school)
        if percentile is None:
            return None

        return clamp((percentile - 50.0) / 50.0, -1.0, 1.0)

    def enrolled_percentile(
        self,
        gpa: float,
        school: SchoolData,
    ) -> Optional[float]:
        """
        Percentile (0-100) of enrolled freshmen below the student's GPA.

        Band shares are normalized by their total, so histograms that sum to
        roughly 100 (rounding in published data) are handled. Missing bands
        count as empty.
        """
        distribution = school.gpa_distribution
        if not distribution.has_data:
            return None

        shares = [max(0.0, float(share or 0.0)) for share in distribution.as_tuple()]
        total = sum(shares)
        if total <= 0:
            return None

        normalized = [share / total * 100.0 for share in shares]
        interval_shares, perfect_share = normalized[:5], normalized[5]

        cumulative_below = 0.0

        if gpa >= PERFECT_GPA:
            # Ties inside the 4.00 point mass count as half below
            return clamp(sum(interval_shares) + perfect_share / 2.0, 0.0, 100.0)

        for (band_min, band_max), share in zip(GPA_BAND_BOUNDS, interval_shares):
            if gpa >= band_max:
                cumulative_below += share
                continue

            position_in_band = (gpa - band_min) / (band_max - band_min)
            cumulative_below += share * clamp(position_in_band, 0.0, 1.0)
            break

        return clamp(cumulative_below, 0.0, 100.0)
