"""
Unit tests for the stat axes and the percentile positioner.
"""

import pytest

from chances.domain.scoring.axes import ActAxis, GpaDistributionAxis, SatAxis
from chances.domain.scoring.interfaces import GpaDistribution, StudentProfile
from chances.domain.scoring.percentile_positioner import PercentilePositioner


# ============== Test Fixtures ==============

@pytest.fixture
def sat_axis():
    return SatAxis()


@pytest.fixture
def gpa_axis():
    return GpaDistributionAxis()


@pytest.fixture
def even_distribution():
    """Complete histogram summing to 100."""
    return GpaDistribution(
        percent_400=20.0,
        percent_375_399=30.0,
        percent_350_374=30.0,
        percent_325_349=10.0,
        percent_300_324=10.0,
        percent_below_300=0.0,
    )


def sat_student(score):
    return StudentProfile(state_of_residence="CA", sat_score=score)


def gpa_student(gpa):
    return StudentProfile(state_of_residence="CA", gpa_unweighted=gpa)


# ============== Test Score Axis Tests ==============

class TestScoreRangeAxis:
    """Tests for the piecewise-linear SAT/ACT position."""

    @pytest.mark.parametrize(
        "score, expected",
        [
            (1200, 0.0),
            (1300, 0.5),
            (1400, 1.0),
            (1550, 1.0),
            (1100, -0.5),
            (800, -1.0),
        ],
    )
    def test_sat_positions(self, sat_axis, score, expected):
        assert sat_axis.score_position(score, 1200, 1400) == pytest.approx(expected)

    def test_degenerate_range_uses_fallback_width(self, sat_axis):
        """p25 == p75 falls back to an 80-point width for SAT."""
        assert sat_axis.score_position(1260, 1300, 1300) == pytest.approx(-0.5)
        assert sat_axis.score_position(1300, 1300, 1300) == 1.0

    def test_swapped_percentiles_are_reordered(self, sat_axis, school_factory):
        school = school_factory(sat_25th=1400, sat_75th=1200)
        assert sat_axis.position(sat_student(1300), school) == pytest.approx(0.5)

    def test_missing_range_returns_none(self, sat_axis, school_factory):
        school = school_factory(sat_25th=None, sat_75th=1400)
        assert sat_axis.position(sat_student(1300), school) is None

    def test_missing_student_score_returns_none(self, sat_axis, school_factory):
        school = school_factory(sat_25th=1200, sat_75th=1400)
        assert sat_axis.position(gpa_student(3.5), school) is None

    def test_act_axis(self, school_factory):
        axis = ActAxis()
        school = school_factory(act_25th=30, act_75th=34)

        assert axis.name == "act"
        assert axis.position(
            StudentProfile(state_of_residence="CA", act_score=32), school
        ) == pytest.approx(0.5)
        assert axis.position(
            StudentProfile(state_of_residence="CA", act_score=27), school
        ) == pytest.approx(-0.75)

    def test_sat_position_is_monotonic(self, sat_axis):
        positions = [
            sat_axis.score_position(score, 1200, 1400)
            for score in range(400, 1601, 10)
        ]
        assert positions == sorted(positions)


# ============== GPA Axis Tests ==============

class TestGpaDistributionAxis:
    """Tests for the CDS GPA-band percentile."""

    def test_interpolates_inside_band(self, gpa_axis, even_distribution, school_factory):
        """3.6 sits 40% into the 3.50-3.74 band: 10 + 10 + 0.4 * 30 = 32."""
        percentile = gpa_axis.enrolled_percentile(
            3.6, school_factory(gpa_distribution=even_distribution)
        )
        assert percentile == pytest.approx(32.0)

    def test_position_is_centered_on_median(self, gpa_axis, even_distribution, school_factory):
        school = school_factory(gpa_distribution=even_distribution)
        assert gpa_axis.position(gpa_student(3.6), school) == pytest.approx(-0.36)

    def test_perfect_gpa_counts_half_of_ties(self, gpa_axis, even_distribution, school_factory):
        """All interval bands (80) plus half of the 4.00 band (10)."""
        assert gpa_axis.enrolled_percentile(
            4.0, school_factory(gpa_distribution=even_distribution)
        ) == pytest.approx(90.0)

    def test_bottom_of_distribution(self, gpa_axis, even_distribution, school_factory):
        school = school_factory(gpa_distribution=even_distribution)
        assert gpa_axis.position(gpa_student(3.0), school) == pytest.approx(-1.0)

    def test_partial_histogram_is_normalized(self, gpa_axis, school_factory):
        """Two bands summing to 50 are rescaled to 100."""
        school = school_factory(
            gpa_distribution=GpaDistribution(percent_400=25.0, percent_375_399=25.0)
        )
        assert gpa_axis.position(gpa_student(3.875), school) == pytest.approx(-0.5)

    def test_no_distribution_returns_none(self, gpa_axis, school_factory):
        assert gpa_axis.position(gpa_student(3.8), school_factory()) is None

    def test_all_zero_distribution_returns_none(self, gpa_axis, school_factory):
        school = school_factory(
            gpa_distribution=GpaDistribution(percent_400=0.0, percent_375_399=0.0)
        )
        assert gpa_axis.position(gpa_student(3.8), school) is None


# ============== Positioner Tests ==============

class TestPercentilePositioner:
    """Tests for dynamic averaging across axes."""

    def test_averages_available_axes(self, even_distribution, school_factory):
        school = school_factory(
            sat_25th=1200, sat_75th=1400, gpa_distribution=even_distribution
        )
        profile = StudentProfile(
            state_of_residence="CA", gpa_unweighted=4.0, sat_score=1300
        )

        breakdown = PercentilePositioner().position(profile, school)

        assert breakdown.gpa == pytest.approx(0.8)
        assert breakdown.sat == pytest.approx(0.5)
        assert breakdown.act is None
        assert breakdown.overall == pytest.approx(0.65)

    def test_no_overlap_gives_no_overall(self, school_factory):
        school = school_factory(act_25th=30, act_75th=34)
        breakdown = PercentilePositioner().position(sat_student(1400), school)

        assert breakdown.overall is None

    def test_overall_stays_in_range(self, even_distribution, school_factory):
        school = school_factory(
            sat_25th=1500, sat_75th=1580,
            act_25th=35, act_75th=36,
            gpa_distribution=even_distribution,
        )
        profile = StudentProfile(
            state_of_residence="CA", gpa_unweighted=2.0, sat_score=400, act_score=1
        )

        breakdown = PercentilePositioner().position(profile, school)

        assert -1.0 <= breakdown.overall <= 1.0
