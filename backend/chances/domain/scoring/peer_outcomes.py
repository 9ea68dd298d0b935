"""
Peer-Outcome Aggregator

Turns raw peer-cohort counts into an empirical acceptance rate and a
sample-size trust weight.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from chances.domain.scoring.interfaces import (
    ClassifierConstants,
    RoundBreakdown,
    SimilarProfileStats,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeerSignal:
    """Empirical evidence from similar applicants at one school."""
    empirical_rate: float  # 0-1
    confidence: float  # 0-1, grows linearly with sample size
    sample_size: int
    accepted: int
    rejected: int
    waitlisted: int
    rounds: RoundBreakdown


class PeerOutcomeAggregator:
    """
    Validates cohort counts and derives the peer signal.

    Confidence rises linearly from 0 and saturates at MIN_CONFIDENT_SAMPLE
    peers, so a single anecdote never dominates the estimate.
    """

    def __init__(self, constants: Optional[ClassifierConstants] = None):
        self._constants = constants or ClassifierConstants()

    def index_by_school(
        self,
        peer_stats: Iterable[SimilarProfileStats],
    ) -> Dict[str, SimilarProfileStats]:
        """Map school id to its stats. A later duplicate replaces an earlier one."""
        indexed: Dict[str, SimilarProfileStats] = {}
        for stats in peer_stats:
            if stats.school_id in indexed:
                logger.warning(
                    f"[PEER-STATS] Duplicate cohort entry for school {stats.school_id}"
                )
            indexed[stats.school_id] = stats
        return indexed

    def is_consistent(self, stats: SimilarProfileStats) -> bool:
        """
        Check the count invariants.

        - at least one similar applicant
        - no negative counts
        - accepted + rejected + waitlisted <= total
        - round-specific acceptances <= accepted
        """
        counts = (
            stats.accepted,
            stats.rejected,
            stats.waitlisted,
            stats.accepted_early_decision,
            stats.accepted_early_action,
            stats.accepted_regular,
        )
        if stats.total_similar < 1 or any(count < 0 for count in counts):
            return False

        if stats.accepted + stats.rejected + stats.waitlisted > stats.total_similar:
            return False

        round_total = (
            stats.accepted_early_decision
            + stats.accepted_early_action
            + stats.accepted_regular
        )
        return round_total <= stats.accepted

    def sample_confidence(self, total_similar: int) -> float:
        """Linear trust weight, 1.0 at or above MIN_CONFIDENT_SAMPLE."""
        if total_similar <= 0:
            return 0.0
        return min(1.0, total_similar / self._constants.min_confident_sample)

    def aggregate(self, stats: Optional[SimilarProfileStats]) -> Optional[PeerSignal]:
        """
        Build the peer signal for one school.

        Returns None when there is no entry or the entry is corrupt; the
        caller then falls back to the institutional baseline.
        """
        if stats is None:
            return None

        if not self.is_consistent(stats):
            logger.warning(
                f"[PEER-STATS] Discarding corrupt cohort counts for school "
                f"{stats.school_id}: total={stats.total_similar} "
                f"accepted={stats.accepted} rejected={stats.rejected} "
                f"waitlisted={stats.waitlisted}"
            )
            return None

        return PeerSignal(
            empirical_rate=stats.accepted / stats.total_similar,
            confidence=self.sample_confidence(stats.total_similar),
            sample_size=stats.total_similar,
            accepted=stats.accepted,
            rejected=stats.rejected,
            waitlisted=stats.waitlisted,
            rounds=RoundBreakdown(
                early_decision=stats.accepted_early_decision,
                early_action=stats.accepted_early_action,
                regular=stats.accepted_regular,
            ),
        )
