"""
Chances Engine

Central classification engine. Turns a student profile, institutional
statistics and peer-cohort outcomes into one ClassificationResult per school.

Pure and synchronous: no I/O, no shared mutable state, inputs untouched.
Safe to call concurrently from any number of requests.
"""

from typing import Iterable, List, Optional, Sequence

from chances.domain.scoring.interfaces import (
    AdmissionTier,
    ClassificationResult,
    ClassifierConstants,
    ConfidenceLevel,
    SchoolData,
    SimilarProfileStats,
    StudentProfile,
)
from chances.domain.scoring.percentile_positioner import PercentilePositioner
from chances.domain.scoring.peer_outcomes import PeerOutcomeAggregator
from chances.domain.scoring.score_blender import ScoreBlender
from chances.domain.scoring.tier_classifier import TierClassifier
from chances.domain.scoring.result_assembler import (
    ChancesResponse,
    ResultAssembler,
    SchoolAssessment,
)


class ChancesEngine:
    """
    Admission chances engine.

    Follows Single Responsibility - each collaborator handles one step:
    positioning, peer aggregation, blending, tiering, assembly.
    """

    def __init__(self, constants: Optional[ClassifierConstants] = None):
        """
        Initialize the engine.

        Args:
            constants: Tunable constants. If None, uses defaults.
        """
        self._constants = constants or ClassifierConstants()
        self._positioner = PercentilePositioner(constants=self._constants)
        self._peer_aggregator = PeerOutcomeAggregator(self._constants)
        self._blender = ScoreBlender(self._constants)
        self._tier_classifier = TierClassifier(self._constants)
        self._assembler = ResultAssembler(self._constants)

    @property
    def constants(self) -> ClassifierConstants:
        return self._constants

    def classify_school(
        self,
        profile: StudentProfile,
        school: SchoolData,
        peer_stats: Optional[SimilarProfileStats] = None,
    ) -> ClassificationResult:
        """
        Classify a single school for the student.

        Args:
            profile: Student profile
            school: Institutional snapshot
            peer_stats: Peer-cohort counts for this school, if any

        Returns:
            ClassificationResult with probability, tier, confidence, evidence
        """
        if not profile.has_any_stat:
            return self._assembler.build_result(
                SchoolAssessment(
                    school=school,
                    tier=AdmissionTier.UNSCORED,
                    confidence_level=ConfidenceLevel.LOW,
                    profile_has_stats=False,
                )
            )

        position = self._positioner.position(profile, school)
        peer = self._peer_aggregator.aggregate(peer_stats)
        peer_data_discarded = peer_stats is not None and peer is None

        # Without a published rate only peer outcomes can anchor an estimate
        if school.acceptance_rate is None and peer is None:
            return self._assembler.build_result(
                SchoolAssessment(
                    school=school,
                    tier=AdmissionTier.UNSCORED,
                    confidence_level=ConfidenceLevel.LOW,
                    position=position,
                    peer_data_discarded=peer_data_discarded,
                )
            )

        blended = self._blender.blend(school, position, peer)
        tier = self._tier_classifier.classify(
            probability=blended.probability,
            acceptance_rate=school.acceptance_rate,
            confidence=blended.confidence,
        )

        return self._assembler.build_result(
            SchoolAssessment(
                school=school,
                tier=tier,
                confidence_level=self._tier_classifier.confidence_level(
                    blended.confidence
                ),
                position=position,
                blended=blended,
                peer=peer,
                peer_data_discarded=peer_data_discarded,
            )
        )

    def classify_schools(
        self,
        profile: StudentProfile,
        schools: Sequence[SchoolData],
        peer_stats: Iterable[SimilarProfileStats],
    ) -> List[ClassificationResult]:
        """
        Classify every school.

        Args:
            profile: Student profile
            schools: Full institutional snapshot
            peer_stats: One entry per school with at least one similar peer

        Returns:
            One result per input school, grouped by tier in presentation order
        """
        peer_by_school = self._peer_aggregator.index_by_school(peer_stats)

        results = [
            self.classify_school(profile, school, peer_by_school.get(school.id))
            for school in schools
        ]

        return self._assembler.order(results)

    def build_response(
        self,
        profile: StudentProfile,
        schools: Sequence[SchoolData],
        peer_stats: Iterable[SimilarProfileStats],
        max_results_per_tier: Optional[int] = None,
    ) -> ChancesResponse:
        """Classify and group results by tier for the HTTP layer."""
        results = self.classify_schools(profile, schools, peer_stats)
        return self._assembler.build_response(
            profile, results, max_results_per_tier=max_results_per_tier
        )


_default_engine = ChancesEngine()


def classify_schools(
    profile: StudentProfile,
    schools: Sequence[SchoolData],
    peer_stats: Iterable[SimilarProfileStats],
) -> List[ClassificationResult]:
    """Classify schools with the default constants."""
    return _default_engine.classify_schools(profile, schools, peer_stats)
