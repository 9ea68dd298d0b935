"""
Scoring Interfaces for the Chances Calculator

Defines the value types flowing through the classification engine and the
protocol implemented by each stat axis.
All types are immutable: built once per request, never persisted.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any, Protocol, runtime_checkable


class AdmissionTier(Enum):
    """Admissions-difficulty tier of a school relative to one student."""
    SAFETY = "Safety"
    TARGET = "Target"
    REACH = "Reach"
    FAR_REACH = "FarReach"
    UNSCORED = "Unscored"


# Presentation order used by the result assembler
TIER_ORDER: Dict[AdmissionTier, int] = {
    AdmissionTier.SAFETY: 0,
    AdmissionTier.TARGET: 1,
    AdmissionTier.REACH: 2,
    AdmissionTier.FAR_REACH: 3,
    AdmissionTier.UNSCORED: 4,
}


class ConfidenceLevel(Enum):
    """Coarse confidence bucket for display."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ClassifierConstants:
    """
    Tunable constants of the engine.

    Defaults are heuristics sized against the peer tolerance windows
    (GPA ±0.15, SAT ±80, ACT ±3); settings may override every value.
    """
    adjustment_scale: float = 0.25
    min_confident_sample: int = 8
    global_prior: float = 0.30
    probability_floor: float = 0.01
    probability_ceiling: float = 0.99
    reach_threshold: float = 0.25
    safety_threshold: float = 0.60
    far_reach_acceptance_rate: float = 10.0  # percent
    far_reach_probability: float = 0.40
    min_display_confidence: float = 0.15
    sat_fallback_width: float = 80.0
    act_fallback_width: float = 3.0


@dataclass(frozen=True)
class StudentProfile:
    """
    Request-scoped academic profile of the student asking for chances.

    Upstream validation guarantees at least one of GPA/SAT/ACT; the engine
    still copes with none.
    """
    state_of_residence: str
    gpa_unweighted: Optional[float] = None  # 0.00-4.00
    sat_score: Optional[int] = None  # 400-1600
    act_score: Optional[int] = None  # 1-36
    intended_major: Optional[str] = None
    ap_courses_count: Optional[int] = None

    @property
    def has_any_stat(self) -> bool:
        """Whether at least one stat axis is usable."""
        return any(
            value is not None
            for value in (self.gpa_unweighted, self.sat_score, self.act_score)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gpa_unweighted": self.gpa_unweighted,
            "sat_score": self.sat_score,
            "act_score": self.act_score,
            "state_of_residence": self.state_of_residence,
            "intended_major": self.intended_major,
            "ap_courses_count": self.ap_courses_count,
        }


@dataclass(frozen=True)
class GpaDistribution:
    """
    Share (percent) of enrolled freshmen in each unweighted GPA band.

    Bands follow the Common Data Set histogram. Sum is ~100 when complete.
    """
    percent_400: Optional[float] = None  # >= 4.00
    percent_375_399: Optional[float] = None
    percent_350_374: Optional[float] = None
    percent_325_349: Optional[float] = None
    percent_300_324: Optional[float] = None
    percent_below_300: Optional[float] = None

    @property
    def has_data(self) -> bool:
        return any(share is not None for share in self.as_tuple())

    def as_tuple(self) -> tuple:
        """Band shares ordered from the lowest band to the highest."""
        return (
            self.percent_below_300,
            self.percent_300_324,
            self.percent_325_349,
            self.percent_350_374,
            self.percent_375_399,
            self.percent_400,
        )


@dataclass(frozen=True)
class SchoolData:
    """
    Read-only snapshot of one school's institutional statistics.

    Any statistic may be missing for lesser-known institutions.
    """
    id: str
    name: str
    slug: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    school_type: Optional[str] = None

    # Admission statistics
    acceptance_rate: Optional[float] = None  # 0-100
    sat_average: Optional[int] = None
    sat_25th: Optional[int] = None
    sat_75th: Optional[int] = None
    act_median: Optional[int] = None
    act_25th: Optional[int] = None
    act_75th: Optional[int] = None
    gpa_distribution: GpaDistribution = field(default_factory=GpaDistribution)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "state": self.state,
            "city": self.city,
            "school_type": self.school_type,
            "acceptance_rate": self.acceptance_rate,
            "sat_average": self.sat_average,
            "sat_25th": self.sat_25th,
            "sat_75th": self.sat_75th,
            "act_median": self.act_median,
            "act_25th": self.act_25th,
            "act_75th": self.act_75th,
        }


@dataclass(frozen=True)
class SimilarProfileStats:
    """
    Outcome counts of peer-cohort submissions at one school.

    Counts not covered by accepted/rejected/waitlisted are deferred or other.
    """
    school_id: str
    total_similar: int
    accepted: int = 0
    rejected: int = 0
    waitlisted: int = 0
    accepted_early_decision: int = 0
    accepted_early_action: int = 0
    accepted_regular: int = 0


@dataclass(frozen=True)
class RoundBreakdown:
    """Accepted peers by application round. Informational only."""
    early_decision: int = 0
    early_action: int = 0
    regular: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "early_decision": self.early_decision,
            "early_action": self.early_action,
            "regular": self.regular,
        }


@dataclass(frozen=True)
class PositionBreakdown:
    """Per-axis positions in [-1, 1]; None when the axis was unavailable."""
    gpa: Optional[float] = None
    sat: Optional[float] = None
    act: Optional[float] = None
    overall: Optional[float] = None

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "gpa": _round_or_none(self.gpa, 3),
            "sat": _round_or_none(self.sat, 3),
            "act": _round_or_none(self.act, 3),
            "overall": _round_or_none(self.overall, 3),
        }


@dataclass(frozen=True)
class Evidence:
    """
    Signals behind a classification, returned for explainability.
    """
    institutional_signal: Optional[float]  # adjusted baseline, 0-1
    peer_signal: Optional[float]  # empirical peer acceptance rate, 0-1
    peer_sample_size: int = 0
    peer_weight: float = 0.0
    institutional_rate: Optional[float] = None
    acceptance_rate_known: bool = False
    position: PositionBreakdown = field(default_factory=PositionBreakdown)
    peers_accepted: int = 0
    peers_rejected: int = 0
    peers_waitlisted: int = 0
    rounds: RoundBreakdown = field(default_factory=RoundBreakdown)
    peer_data_discarded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "institutional_signal": _round_or_none(self.institutional_signal, 4),
            "peer_signal": _round_or_none(self.peer_signal, 4),
            "peer_sample_size": self.peer_sample_size,
            "peer_weight": round(self.peer_weight, 4),
            "institutional_rate": _round_or_none(self.institutional_rate, 4),
            "acceptance_rate_known": self.acceptance_rate_known,
            "position": self.position.to_dict(),
            "peers_accepted": self.peers_accepted,
            "peers_rejected": self.peers_rejected,
            "peers_waitlisted": self.peers_waitlisted,
            "rounds": self.rounds.to_dict(),
            "peer_data_discarded": self.peer_data_discarded,
        }


@dataclass(frozen=True)
class ClassificationResult:
    """
    Engine output for one school.

    Final output ready for presentation.
    """
    school_id: str
    school_name: str
    probability_estimate: Optional[float]  # 0.0-1.0, None when unscored
    tier: AdmissionTier
    confidence: float  # 0.0-1.0
    evidence: Evidence
    confidence_level: ConfidenceLevel = ConfidenceLevel.LOW
    reasoning: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response format."""
        return {
            "school_id": self.school_id,
            "school_name": self.school_name,
            "probability_estimate": _round_or_none(self.probability_estimate, 4),
            "tier": self.tier.value,
            "confidence": round(self.confidence, 4),
            "confidence_level": self.confidence_level.value,
            "evidence": self.evidence.to_dict(),
            "reasoning": self.reasoning,
        }


@runtime_checkable
class PositionAxis(Protocol):
    """
    Protocol for a single stat axis (GPA, SAT, ACT).

    Each axis turns the student's stat and the school's distribution into a
    signed position in [-1, 1], or None when either side lacks data.
    """

    @property
    def name(self) -> str:
        """Axis name for the evidence breakdown."""
        ...

    def position(
        self,
        profile: StudentProfile,
        school: SchoolData,
    ) -> Optional[float]:
        ...


class BasePositionAxis(ABC):
    """Base class for stat axes."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def position(
        self,
        profile: StudentProfile,
        school: SchoolData,
    ) -> Optional[float]:
        pass


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_or_none(value: Optional[float], digits: int) -> Optional[float]:
    return round(value, digits) if value is not None else None
