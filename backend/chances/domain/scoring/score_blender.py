"""
Score Blender

Produces one probability estimate per school from the institutional
baseline and the peer signal.

The blend is a confidence-weighted linear interpolation, not a Bayesian
posterior. Every coefficient is visible in the evidence returned to users.
"""

from dataclasses import dataclass
from typing import Optional

from chances.domain.scoring.interfaces import (
    ClassifierConstants,
    PositionBreakdown,
    SchoolData,
    clamp,
)
from chances.domain.scoring.peer_outcomes import PeerSignal


@dataclass(frozen=True)
class BlendedScore:
    """Intermediate blend result for one school."""
    probability: float
    confidence: float
    adjusted_baseline: float
    institutional_rate: float
    acceptance_rate_known: bool
    institutional_completeness: float
    peer_weight: float


class ScoreBlender:
    """
    Institutional baseline + peer outcomes.

    baseline = clamp(rate + position * ADJUSTMENT_SCALE, floor, ceiling)
    final    = c * empirical_rate + (1 - c) * baseline
    """

    def __init__(self, constants: Optional[ClassifierConstants] = None):
        self._constants = constants or ClassifierConstants()

    def institutional_rate(self, school: SchoolData) -> Optional[float]:
        """Published acceptance rate as a 0-1 fraction, None when unknown."""
        if school.acceptance_rate is None:
            return None
        return clamp(school.acceptance_rate / 100.0, 0.0, 1.0)

    def adjusted_baseline(
        self,
        institutional_rate: Optional[float],
        position: Optional[float],
    ) -> float:
        """
        Shift the acceptance rate by the student's position.

        Unknown rates fall back to the global prior.
        """
        rate = (
            institutional_rate
            if institutional_rate is not None
            else self._constants.global_prior
        )
        if position is not None:
            rate += position * self._constants.adjustment_scale

        return clamp(
            rate,
            self._constants.probability_floor,
            self._constants.probability_ceiling,
        )

    def institutional_completeness(
        self,
        acceptance_rate_known: bool,
        has_position: bool,
    ) -> float:
        """1.0 with an acceptance rate and an axis, 0.5 with one, 0.0 with none."""
        completeness = 0.0
        if acceptance_rate_known:
            completeness += 0.5
        if has_position:
            completeness += 0.5
        return completeness

    def blend(
        self,
        school: SchoolData,
        position: PositionBreakdown,
        peer: Optional[PeerSignal],
    ) -> BlendedScore:
        """
        Blend both signals for one school.

        Args:
            school: Institutional snapshot
            position: Output of the percentile positioner
            peer: Validated peer signal, None without usable peer data

        Returns:
            BlendedScore with probability in [0, 1]
        """
        rate = self.institutional_rate(school)
        baseline = self.adjusted_baseline(rate, position.overall)
        completeness = self.institutional_completeness(
            acceptance_rate_known=rate is not None,
            has_position=position.overall is not None,
        )

        if peer is None:
            probability = baseline
            confidence = completeness
            peer_weight = 0.0
        else:
            peer_weight = peer.confidence
            probability = (
                peer_weight * peer.empirical_rate
                + (1.0 - peer_weight) * baseline
            )
            confidence = peer_weight + (1.0 - peer_weight) * completeness

        return BlendedScore(
            probability=clamp(probability, 0.0, 1.0),
            confidence=clamp(confidence, 0.0, 1.0),
            adjusted_baseline=baseline,
            institutional_rate=rate if rate is not None else self._constants.global_prior,
            acceptance_rate_known=rate is not None,
            institutional_completeness=completeness,
            peer_weight=peer_weight,
        )
