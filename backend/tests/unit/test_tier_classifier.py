"""
Unit tests for the tier classifier.
"""

import pytest

from chances.domain.scoring.interfaces import (
    AdmissionTier,
    ClassifierConstants,
    ConfidenceLevel,
)
from chances.domain.scoring.tier_classifier import TierClassifier


@pytest.fixture
def classifier():
    return TierClassifier()


class TestTierRules:
    """Tests for the ordered tier rules."""

    @pytest.mark.parametrize(
        "probability, acceptance_rate, confidence, expected",
        [
            (0.35, 8.0, 1.0, AdmissionTier.FAR_REACH),
            (0.45, 8.0, 1.0, AdmissionTier.TARGET),
            (0.05, None, 1.0, AdmissionTier.REACH),
            (0.20, 50.0, 1.0, AdmissionTier.REACH),
            (0.25, 50.0, 1.0, AdmissionTier.TARGET),
            (0.59, 50.0, 1.0, AdmissionTier.TARGET),
            (0.60, 50.0, 1.0, AdmissionTier.SAFETY),
            (0.70, None, 0.5, AdmissionTier.SAFETY),
        ],
    )
    def test_classification(self, classifier, probability, acceptance_rate, confidence, expected):
        assert classifier.classify(probability, acceptance_rate, confidence) == expected

    def test_missing_probability_is_unscored(self, classifier):
        assert classifier.classify(None, 40.0, 0.0) == AdmissionTier.UNSCORED

    def test_far_reach_needs_known_rate(self, classifier):
        """A null acceptance rate never triggers the selectivity rule."""
        assert classifier.classify(0.30, None, 1.0) == AdmissionTier.TARGET


class TestLowConfidenceOverride:
    """Thin evidence never yields a Safety."""

    def test_low_confidence_safety_becomes_target(self, classifier):
        assert classifier.classify(0.80, 70.0, 0.10) == AdmissionTier.TARGET

    def test_threshold_is_inclusive(self, classifier):
        assert classifier.classify(0.80, 70.0, 0.15) == AdmissionTier.SAFETY

    def test_reach_is_never_upgraded(self, classifier):
        assert classifier.classify(0.10, 70.0, 0.0) == AdmissionTier.REACH
        assert classifier.classify(0.10, 5.0, 0.0) == AdmissionTier.FAR_REACH

    def test_configurable_thresholds(self):
        classifier = TierClassifier(
            ClassifierConstants(reach_threshold=0.3, safety_threshold=0.8)
        )
        assert classifier.classify(0.28, 50.0, 1.0) == AdmissionTier.REACH
        assert classifier.classify(0.70, 50.0, 1.0) == AdmissionTier.TARGET


class TestConfidenceLevel:
    """Display buckets for the numeric confidence."""

    @pytest.mark.parametrize(
        "confidence, expected",
        [
            (1.0, ConfidenceLevel.HIGH),
            (0.75, ConfidenceLevel.HIGH),
            (0.5, ConfidenceLevel.MEDIUM),
            (0.375, ConfidenceLevel.MEDIUM),
            (0.3, ConfidenceLevel.LOW),
            (0.0, ConfidenceLevel.LOW),
        ],
    )
    def test_buckets(self, classifier, confidence, expected):
        assert classifier.confidence_level(confidence) == expected
