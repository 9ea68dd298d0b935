"""
Peer Cohort Query

Describes which historical submissions count as "similar" to a requester,
and the canonical coarsening used to share cached cohort aggregates across
near-identical profiles.
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Tuple

from chances.domain.scoring.interfaces import SimilarProfileStats, StudentProfile


logger = logging.getLogger(__name__)


def _round_half_up(value: float, step: str) -> Decimal:
    """Round to a multiple of `step`, halves away from zero."""
    quantum = Decimal(step)
    return (Decimal(str(value)) / quantum).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    ) * quantum


@dataclass(frozen=True)
class PeerCohortQuery:
    """
    Inputs of the peer-cohort aggregate.

    Tolerance windows (GPA ±0.15, SAT ±80, ACT ±3) are applied by the
    repository around these centres; absent values apply no filter. The
    service passes the coarsened query, so a SAT of 1489 is searched as
    1480 ± 80, not 1489 ± 80.
    """
    gpa_unweighted: Optional[float] = None
    sat_score: Optional[int] = None
    act_score: Optional[int] = None
    intended_major: Optional[str] = None
    admission_cycle: Optional[str] = None

    @classmethod
    def from_profile(
        cls,
        profile: StudentProfile,
        admission_cycle: Optional[str] = None,
    ) -> "PeerCohortQuery":
        return cls(
            gpa_unweighted=profile.gpa_unweighted,
            sat_score=profile.sat_score,
            act_score=profile.act_score,
            intended_major=profile.intended_major,
            admission_cycle=admission_cycle,
        )

    def coarsen(self) -> "PeerCohortQuery":
        """
        Canonical coarse query.

        GPA to the nearest 0.1, SAT to the nearest 20, ACT to the nearest
        integer; major trimmed and lower-cased.
        """
        gpa = (
            float(_round_half_up(self.gpa_unweighted, "0.1"))
            if self.gpa_unweighted is not None
            else None
        )
        sat = (
            int(_round_half_up(self.sat_score, "20"))
            if self.sat_score is not None
            else None
        )
        act = (
            int(_round_half_up(self.act_score, "1"))
            if self.act_score is not None
            else None
        )
        major = self.intended_major.strip().lower() if self.intended_major else None

        return replace(
            self,
            gpa_unweighted=gpa,
            sat_score=sat,
            act_score=act,
            intended_major=major or None,
        )

    def cache_key(self) -> str:
        """Cache key of the coarsened query."""
        coarse = self.coarsen()

        def part(value) -> str:
            return "null" if value is None else str(value)

        return (
            f"chances-similar-gpa:{part(coarse.gpa_unweighted)}"
            f"-sat:{part(coarse.sat_score)}"
            f"-act:{part(coarse.act_score)}"
            f"-major:{part(coarse.intended_major)}"
            f"-cycle:{part(coarse.admission_cycle)}"
        )


def _outcome_counts(stats: SimilarProfileStats) -> Tuple[int, ...]:
    """Disjoint outcome counts; the last one is deferred or other."""
    other = stats.total_similar - stats.accepted - stats.rejected - stats.waitlisted
    return (stats.accepted, stats.rejected, stats.waitlisted, other)


def _round_counts(stats: SimilarProfileStats) -> Tuple[int, int, int]:
    return (
        stats.accepted_early_decision,
        stats.accepted_early_action,
        stats.accepted_regular,
    )


def _fit_rounds(rounds: Tuple[int, int, int], accepted: int) -> Tuple[int, int, int]:
    """Trim round counts (regular first) until they fit within `accepted`."""
    early_decision, early_action, regular = rounds
    excess = early_decision + early_action + regular - accepted
    for_regular = min(excess, regular) if excess > 0 else 0
    regular -= for_regular
    excess -= for_regular
    for_action = min(excess, early_action) if excess > 0 else 0
    early_action -= for_action
    excess -= for_action
    if excess > 0:
        early_decision -= min(excess, early_decision)
    return early_decision, early_action, regular


def subtract_own_submissions(
    cohort: Iterable[SimilarProfileStats],
    own: Iterable[SimilarProfileStats],
) -> List[SimilarProfileStats]:
    """
    Remove the requester's own submissions from a shared cohort aggregate.

    The cohort may be older than the own-row query. When the requester has
    more rows in some outcome than the cached cohort holds, the school is
    left unchanged rather than producing counts that break the aggregate's
    invariants. Schools left without any similar applicant are dropped.
    """
    own_by_school: Dict[str, SimilarProfileStats] = {s.school_id: s for s in own}
    if not own_by_school:
        return list(cohort)

    adjusted: List[SimilarProfileStats] = []
    for stats in cohort:
        mine = own_by_school.get(stats.school_id)
        if mine is None:
            adjusted.append(stats)
            continue

        outcomes = [
            theirs - ours
            for theirs, ours in zip(_outcome_counts(stats), _outcome_counts(mine))
        ]
        rounds = [
            theirs - ours
            for theirs, ours in zip(_round_counts(stats), _round_counts(mine))
        ]
        if any(count < 0 for count in outcomes + rounds):
            logger.warning(
                f"[PEER-STATS] Own submissions at {stats.school_id} exceed the "
                "cached cohort; leaving its counts unchanged"
            )
            adjusted.append(stats)
            continue

        accepted, rejected, waitlisted, other = outcomes
        remaining = accepted + rejected + waitlisted + other
        if remaining < 1:
            continue

        early_decision, early_action, regular = _fit_rounds(tuple(rounds), accepted)
        adjusted.append(
            SimilarProfileStats(
                school_id=stats.school_id,
                total_similar=remaining,
                accepted=accepted,
                rejected=rejected,
                waitlisted=waitlisted,
                accepted_early_decision=early_decision,
                accepted_early_action=early_action,
                accepted_regular=regular,
            )
        )

    return adjusted
