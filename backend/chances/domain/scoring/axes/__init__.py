# Stat axes submodule
from chances.domain.scoring.axes.score_range_axis import ScoreRangeAxis, SatAxis, ActAxis
from chances.domain.scoring.axes.gpa_axis import GpaDistributionAxis

__all__ = [
    "ScoreRangeAxis",
    "SatAxis",
    "ActAxis",
    "GpaDistributionAxis",
]
