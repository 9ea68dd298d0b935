# Scoring module for the Chances Calculator
from chances.domain.scoring.interfaces import (
    AdmissionTier,
    ClassificationResult,
    ClassifierConstants,
    ConfidenceLevel,
    Evidence,
    GpaDistribution,
    PositionAxis,
    BasePositionAxis,
    SchoolData,
    SimilarProfileStats,
    StudentProfile,
)
from chances.domain.scoring.percentile_positioner import PercentilePositioner
from chances.domain.scoring.peer_outcomes import PeerOutcomeAggregator, PeerSignal
from chances.domain.scoring.score_blender import ScoreBlender, BlendedScore
from chances.domain.scoring.tier_classifier import TierClassifier
from chances.domain.scoring.result_assembler import ChancesResponse, ResultAssembler
from chances.domain.scoring.chances_engine import ChancesEngine, classify_schools

__all__ = [
    "AdmissionTier",
    "ClassificationResult",
    "ClassifierConstants",
    "ConfidenceLevel",
    "Evidence",
    "GpaDistribution",
    "PositionAxis",
    "BasePositionAxis",
    "SchoolData",
    "SimilarProfileStats",
    "StudentProfile",
    "PercentilePositioner",
    "PeerOutcomeAggregator",
    "PeerSignal",
    "ScoreBlender",
    "BlendedScore",
    "TierClassifier",
    "ChancesResponse",
    "ResultAssembler",
    "ChancesEngine",
    "classify_schools",
]
