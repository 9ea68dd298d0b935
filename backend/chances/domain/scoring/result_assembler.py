"""
Result Assembler

Builds the per-school ClassificationResult with its evidence, orders the
results deterministically and groups them by tier for presentation.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from chances.domain.scoring.interfaces import (
    TIER_ORDER,
    AdmissionTier,
    ClassificationResult,
    ClassifierConstants,
    ConfidenceLevel,
    Evidence,
    PositionBreakdown,
    RoundBreakdown,
    SchoolData,
    StudentProfile,
)
from chances.domain.scoring.peer_outcomes import PeerSignal
from chances.domain.scoring.score_blender import BlendedScore


@dataclass(frozen=True)
class ChancesResponse:
    """
    Classified schools for one request.

    `results` holds every school in presentation order; `by_tier` holds the
    same results grouped, optionally truncated per tier for display.
    """
    profile: StudentProfile
    results: List[ClassificationResult]
    by_tier: Dict[AdmissionTier, List[ClassificationResult]]
    tier_counts: Dict[AdmissionTier, int]
    total_schools: int
    total_schools_evaluated: int  # schools with a probability estimate

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response format."""
        return {
            "profile": self.profile.to_dict(),
            "tiers": {
                tier.value: [result.to_dict() for result in self.by_tier.get(tier, [])]
                for tier in TIER_ORDER
            },
            "tier_counts": {
                tier.value: self.tier_counts.get(tier, 0) for tier in TIER_ORDER
            },
            "total_schools": self.total_schools,
            "total_schools_evaluated": self.total_schools_evaluated,
        }


@dataclass(frozen=True)
class SchoolAssessment:
    """Everything the engine learned about one school, before assembly."""
    school: SchoolData
    tier: AdmissionTier
    confidence_level: ConfidenceLevel
    position: PositionBreakdown = field(default_factory=PositionBreakdown)
    blended: Optional[BlendedScore] = None
    peer: Optional[PeerSignal] = None
    peer_data_discarded: bool = False
    profile_has_stats: bool = True


class ResultAssembler:
    """Pure transformation from assessments to presentable results."""

    def __init__(self, constants: Optional[ClassifierConstants] = None):
        self._constants = constants or ClassifierConstants()

    def build_result(self, assessment: SchoolAssessment) -> ClassificationResult:
        """Attach evidence and a reasoning line to one school's assessment."""
        blended = assessment.blended
        peer = assessment.peer
        scored = assessment.tier != AdmissionTier.UNSCORED and blended is not None

        evidence = Evidence(
            institutional_signal=blended.adjusted_baseline if scored else None,
            peer_signal=peer.empirical_rate if peer else None,
            peer_sample_size=peer.sample_size if peer else 0,
            peer_weight=blended.peer_weight if scored else 0.0,
            institutional_rate=blended.institutional_rate if scored else None,
            acceptance_rate_known=assessment.school.acceptance_rate is not None,
            position=assessment.position,
            peers_accepted=peer.accepted if peer else 0,
            peers_rejected=peer.rejected if peer else 0,
            peers_waitlisted=peer.waitlisted if peer else 0,
            rounds=peer.rounds if peer else RoundBreakdown(),
            peer_data_discarded=assessment.peer_data_discarded,
        )

        return ClassificationResult(
            school_id=assessment.school.id,
            school_name=assessment.school.name,
            probability_estimate=blended.probability if scored else None,
            tier=assessment.tier,
            confidence=blended.confidence if scored else 0.0,
            evidence=evidence,
            confidence_level=assessment.confidence_level,
            reasoning=self.reasoning(assessment),
        )

    def reasoning(self, assessment: SchoolAssessment) -> str:
        """Human-readable summary of which signals drove the tier."""
        if not assessment.profile_has_stats:
            return "Add a GPA, SAT or ACT score to estimate your chances."

        blended = assessment.blended
        if assessment.tier == AdmissionTier.UNSCORED or blended is None:
            return "Not enough published or peer data to estimate chances."

        parts = [f"Estimated {round(blended.probability * 100)}% chance"]
        peer = assessment.peer

        if peer is not None and blended.peer_weight >= 0.5:
            parts.append(
                f"driven mostly by {peer.accepted} of {peer.sample_size} "
                f"similar applicants admitted"
            )
        elif blended.acceptance_rate_known:
            parts.append(
                f"anchored on the {assessment.school.acceptance_rate:g}% acceptance rate"
            )
        else:
            parts.append("anchored on a generic prior (acceptance rate unknown)")

        overall = assessment.position.overall
        if overall is not None:
            if overall >= 0.75:
                parts.append("your stats sit at or above the top of its range")
            elif overall >= 0.0:
                parts.append("your stats fall within its typical range")
            else:
                parts.append("your stats fall below its typical range")

        sentence = "; ".join(parts) + "."

        if (
            assessment.tier == AdmissionTier.TARGET
            and blended.probability >= self._constants.safety_threshold
        ):
            sentence += " Shown as Target because the supporting data is thin."

        return sentence

    def sort_key(self, result: ClassificationResult) -> tuple:
        """Tier, then probability desc, peer sample desc, name, id."""
        probability = result.probability_estimate
        return (
            TIER_ORDER[result.tier],
            -(probability if probability is not None else -1.0),
            -result.evidence.peer_sample_size,
            result.school_name,
            result.school_id,
        )

    def order(self, results: List[ClassificationResult]) -> List[ClassificationResult]:
        return sorted(results, key=self.sort_key)

    def build_response(
        self,
        profile: StudentProfile,
        results: List[ClassificationResult],
        max_results_per_tier: Optional[int] = None,
    ) -> ChancesResponse:
        """
        Group ordered results by tier.

        Args:
            profile: The requesting student's profile (echoed back)
            results: Results from the engine, any order
            max_results_per_tier: Display cap per tier; None keeps all
        """
        ordered = self.order(results)

        by_tier: Dict[AdmissionTier, List[ClassificationResult]] = {
            tier: [] for tier in TIER_ORDER
        }
        for result in ordered:
            by_tier[result.tier].append(result)

        tier_counts = {tier: len(items) for tier, items in by_tier.items()}

        if max_results_per_tier is not None:
            by_tier = {
                tier: items[:max_results_per_tier] for tier, items in by_tier.items()
            }

        return ChancesResponse(
            profile=profile,
            results=ordered,
            by_tier=by_tier,
            tier_counts=tier_counts,
            total_schools=len(ordered),
            total_schools_evaluated=sum(
                1 for result in ordered if result.probability_estimate is not None
            ),
        )
