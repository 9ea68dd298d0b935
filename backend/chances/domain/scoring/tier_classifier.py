"""
Tier Classifier

Classifies schools as Safety, Target, Reach, FarReach or Unscored.
State-free mapping from (probability, selectivity, confidence) to a tier.
"""

from typing import Optional

from chances.domain.scoring.interfaces import (
    AdmissionTier,
    ClassifierConstants,
    ConfidenceLevel,
)


class TierClassifier:
    """
    School tier classifier.

    Rules, first match wins:
    - Unscored: no institutional or peer data at all
    - FarReach: acceptance rate < 10% AND probability < 0.40
    - Reach: probability < 0.25
    - Target: 0.25 <= probability < 0.60
    - Safety: probability >= 0.60

    Low-confidence Safety results are downgraded to Target. Reach and
    FarReach are never upgraded.
    """

    HIGH_CONFIDENCE_THRESHOLD = 0.75
    MEDIUM_CONFIDENCE_THRESHOLD = 0.375  # 3 of 8 peers

    def __init__(self, constants: Optional[ClassifierConstants] = None):
        self._constants = constants or ClassifierConstants()

    def classify(
        self,
        probability: Optional[float],
        acceptance_rate: Optional[float],
        confidence: float,
    ) -> AdmissionTier:
        """
        Classify one school.

        Args:
            probability: Blended probability (0-1), None when unscorable
            acceptance_rate: Published acceptance rate (0-100) or None
            confidence: Blend confidence (0-1)
        """
        if probability is None:
            return AdmissionTier.UNSCORED

        # Rule 1: hyper-selective schools stay far reaches unless the
        # estimate is strong
        if (
            acceptance_rate is not None
            and acceptance_rate < self._constants.far_reach_acceptance_rate
            and probability < self._constants.far_reach_probability
        ):
            return AdmissionTier.FAR_REACH

        # Rule 2: probability bands (boundaries go to the higher tier)
        if probability < self._constants.reach_threshold:
            return AdmissionTier.REACH

        if probability < self._constants.safety_threshold:
            return AdmissionTier.TARGET

        # Rule 3: no false reassurance on thin evidence
        if confidence < self._constants.min_display_confidence:
            return AdmissionTier.TARGET

        return AdmissionTier.SAFETY

    def confidence_level(self, confidence: float) -> ConfidenceLevel:
        """Bucket confidence for display."""
        if confidence >= self.HIGH_CONFIDENCE_THRESHOLD:
            return ConfidenceLevel.HIGH
        if confidence >= self.MEDIUM_CONFIDENCE_THRESHOLD:
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW
