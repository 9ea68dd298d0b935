"""
Unit tests for the chances engine.

End-to-end classification over the positioner, peer aggregator, blender,
tier classifier and assembler.
"""

import pytest

from chances.domain.scoring import ChancesEngine, classify_schools
from chances.domain.scoring.interfaces import (
    AdmissionTier,
    ClassifierConstants,
    ConfidenceLevel,
    GpaDistribution,
    SimilarProfileStats,
    StudentProfile,
)


# ============== Test Fixtures ==============

@pytest.fixture
def engine():
    return ChancesEngine()


@pytest.fixture
def applicant():
    """Student {gpa: 3.9, sat: 1480, act: null, state: CA}."""
    return StudentProfile(state_of_residence="CA", gpa_unweighted=3.9, sat_score=1480)


@pytest.fixture
def selective_school(school_factory):
    """8% acceptance rate, SAT 1450-1550, full GPA histogram."""
    return school_factory(
        "selective",
        "Selective University",
        acceptance_rate=8.0,
        sat_25th=1450,
        sat_75th=1550,
        gpa_distribution=GpaDistribution(
            percent_400=60.0,
            percent_375_399=30.0,
            percent_350_374=8.0,
            percent_325_349=2.0,
        ),
    )


@pytest.fixture
def accessible_school(school_factory):
    """65% acceptance rate, SAT 1350-1500."""
    return school_factory(
        "accessible",
        "Accessible University",
        acceptance_rate=65.0,
        sat_25th=1350,
        sat_75th=1500,
    )


# ============== Scenario Tests ==============

class TestScenarios:
    """Reference scenarios for the engine."""

    def test_selective_school_with_weak_peer_record_is_far_reach(
        self, engine, applicant, selective_school
    ):
        peers = SimilarProfileStats(
            school_id="selective", total_similar=20, accepted=2, rejected=18
        )

        result = engine.classify_school(applicant, selective_school, peers)

        assert result.evidence.peer_signal == pytest.approx(0.10)
        assert result.evidence.peer_weight == pytest.approx(1.0)
        assert result.confidence == pytest.approx(1.0)
        assert result.probability_estimate == pytest.approx(0.10)
        assert result.tier == AdmissionTier.FAR_REACH
        assert result.confidence_level == ConfidenceLevel.HIGH
        assert "2 of 20 similar applicants" in result.reasoning

    def test_strong_sat_makes_accessible_school_a_safety(
        self, engine, applicant, accessible_school
    ):
        result = engine.classify_school(applicant, accessible_school)

        assert result.evidence.position.sat == pytest.approx(130 / 150)
        assert result.evidence.institutional_signal > 0.65
        assert 0.60 <= result.probability_estimate < 1.0
        assert result.tier == AdmissionTier.SAFETY
        assert result.evidence.peer_sample_size == 0

    def test_school_without_any_data_is_unscored(self, engine, applicant, unknown_school):
        result = engine.classify_school(applicant, unknown_school)

        assert result.tier == AdmissionTier.UNSCORED
        assert result.probability_estimate is None
        assert result.confidence == 0.0
        assert result.reasoning == "Not enough published or peer data to estimate chances."


# ============== Degradation Tests ==============

class TestGracefulDegradation:
    """Incomplete data degrades, never raises."""

    def test_profile_without_stats_is_unscored_everywhere(
        self, engine, empty_student, accessible_school, selective_school
    ):
        results = engine.classify_schools(
            empty_student, [accessible_school, selective_school], []
        )

        assert len(results) == 2
        assert all(r.tier == AdmissionTier.UNSCORED for r in results)
        assert all(r.probability_estimate is None for r in results)
        assert results[0].reasoning == "Add a GPA, SAT or ACT score to estimate your chances."

    def test_unknown_rate_without_peers_is_unscored(self, engine, applicant, school_factory):
        """Stat overlap alone does not stand in for a published rate."""
        school = school_factory(sat_25th=1200, sat_75th=1400)

        result = engine.classify_school(applicant, school)

        assert result.tier == AdmissionTier.UNSCORED
        assert result.probability_estimate is None
        assert result.evidence.position.sat == pytest.approx(1.0)

    def test_unknown_rate_with_peers_uses_prior(
        self, engine, sat_only_student, school_factory, peer_factory
    ):
        school = school_factory("open", sat_25th=1300, sat_75th=1500)

        result = engine.classify_school(
            sat_only_student, school, peer_factory("open", total=2, accepted=1)
        )

        # baseline 0.30 + 0.5 * 0.25 = 0.425, peer weight 0.25
        assert result.evidence.acceptance_rate_known is False
        assert result.evidence.institutional_rate == pytest.approx(0.30)
        assert result.probability_estimate == pytest.approx(0.25 * 0.5 + 0.75 * 0.425)
        assert result.confidence == pytest.approx(0.25 + 0.75 * 0.5)
        assert "generic prior" in result.reasoning

    def test_unknown_school_with_peers_is_scored(self, engine, applicant, unknown_school, peer_factory):
        result = engine.classify_school(
            applicant, unknown_school, peer_factory("unknown", total=8, accepted=6)
        )

        assert result.probability_estimate == pytest.approx(0.75)
        assert result.tier == AdmissionTier.SAFETY

    def test_corrupt_peers_fall_back_to_baseline(self, engine, applicant, accessible_school):
        corrupt = SimilarProfileStats(
            school_id="accessible", total_similar=3, accepted=9
        )

        result = engine.classify_school(applicant, accessible_school, corrupt)
        baseline_only = engine.classify_school(applicant, accessible_school)

        assert result.evidence.peer_data_discarded is True
        assert result.evidence.peer_sample_size == 0
        assert result.probability_estimate == pytest.approx(
            baseline_only.probability_estimate
        )

    def test_corrupt_row_does_not_affect_other_schools(
        self, engine, applicant, accessible_school, selective_school
    ):
        stats = [
            SimilarProfileStats(school_id="accessible", total_similar=-1),
            SimilarProfileStats(school_id="selective", total_similar=20, accepted=2, rejected=18),
        ]

        results = {r.school_id: r for r in engine.classify_schools(
            applicant, [accessible_school, selective_school], stats
        )}

        assert results["selective"].probability_estimate == pytest.approx(0.10)
        assert results["accessible"].tier == AdmissionTier.SAFETY

    def test_thin_evidence_safety_is_shown_as_target(self, school_factory):
        """
        A single peer on an otherwise unknown school gives confidence 0.125.

        With a generous prior: 0.125 * 1.0 + 0.875 * 0.7 = 0.7375.
        """
        engine = ChancesEngine(ClassifierConstants(global_prior=0.7))
        profile = StudentProfile(state_of_residence="CA", act_score=30)
        school = school_factory("thin", "Thin Data College")
        peers = SimilarProfileStats(school_id="thin", total_similar=1, accepted=1)

        result = engine.classify_school(profile, school, peers)

        assert result.probability_estimate == pytest.approx(0.7375)
        assert result.confidence < 0.15
        assert result.tier == AdmissionTier.TARGET
        assert "Shown as Target" in result.reasoning


# ============== Property Tests ==============

class TestProperties:
    """Invariants that hold across inputs."""

    def test_one_result_per_school(self, engine, applicant, ivy, state_school, unknown_school):
        schools = [ivy, state_school, unknown_school]
        results = engine.classify_schools(applicant, schools, [])

        assert sorted(r.school_id for r in results) == sorted(s.id for s in schools)

    def test_probabilities_in_unit_interval(self, engine, applicant, ivy, state_school, peer_factory):
        stats = [peer_factory("ivy", total=3, accepted=3), peer_factory("state", total=50, accepted=1)]
        for result in engine.classify_schools(applicant, [ivy, state_school], stats):
            assert 0.0 <= result.probability_estimate <= 1.0
            assert 0.0 <= result.confidence <= 1.0

    def test_sat_monotonicity(self, engine, accessible_school):
        probabilities = []
        for sat in range(1000, 1601, 20):
            profile = StudentProfile(state_of_residence="CA", sat_score=sat)
            probabilities.append(
                engine.classify_school(profile, accessible_school).probability_estimate
            )
        assert probabilities == sorted(probabilities)

    def test_confidence_monotonic_in_sample_size(self, engine, applicant, state_school, peer_factory):
        confidences = [
            engine.classify_school(
                applicant, state_school, peer_factory("state", total=n, accepted=n // 3)
            ).confidence
            for n in range(1, 25)
        ]
        assert confidences == sorted(confidences)

    def test_no_peers_means_baseline(self, engine, applicant, state_school):
        result = engine.classify_school(applicant, state_school)
        assert result.probability_estimate == pytest.approx(
            result.evidence.institutional_signal
        )

    def test_determinism(self, engine, applicant, ivy, state_school, unknown_school, peer_factory):
        schools = [unknown_school, ivy, state_school]
        stats = [peer_factory("ivy", total=5, accepted=1)]

        first = engine.classify_schools(applicant, schools, stats)
        second = engine.classify_schools(applicant, list(reversed(schools)), stats)

        assert first == second

    def test_module_level_classify_schools(self, applicant, state_school):
        results = classify_schools(applicant, [state_school], [])
        assert results[0].school_id == "state"


# ============== Ordering Tests ==============

class TestOrdering:
    """Results come back grouped by tier in presentation order."""

    def test_tier_order(self, engine, applicant, ivy, state_school, unknown_school, school_factory):
        mid = school_factory("mid", "Mid College", acceptance_rate=40.0)
        low = school_factory("low", "Low Odds College", acceptance_rate=15.0)

        results = engine.classify_schools(
            applicant, [unknown_school, ivy, low, mid, state_school], []
        )

        assert [r.tier for r in results] == [
            AdmissionTier.SAFETY,
            AdmissionTier.TARGET,
            AdmissionTier.REACH,
            AdmissionTier.FAR_REACH,
            AdmissionTier.UNSCORED,
        ]

    def test_ties_break_on_name(self, engine, applicant, school_factory):
        beta = school_factory("b", "Beta College", acceptance_rate=40.0)
        alpha = school_factory("a", "Alpha College", acceptance_rate=40.0)

        results = engine.classify_schools(applicant, [beta, alpha], [])

        assert [r.school_name for r in results] == ["Alpha College", "Beta College"]

    def test_probability_descending_within_tier(self, engine, applicant, school_factory):
        schools = [
            school_factory("t1", "T1", acceptance_rate=30.0),
            school_factory("t2", "T2", acceptance_rate=50.0),
            school_factory("t3", "T3", acceptance_rate=40.0),
        ]

        results = engine.classify_schools(applicant, schools, [])

        assert [r.school_id for r in results] == ["t2", "t3", "t1"]


# ============== Response Tests ==============

class TestBuildResponse:
    """Tier grouping for the HTTP layer."""

    def test_grouping_and_counts(self, engine, applicant, ivy, state_school, unknown_school):
        response = engine.build_response(applicant, [ivy, state_school, unknown_school], [])
        payload = response.to_dict()

        assert response.total_schools == 3
        assert response.total_schools_evaluated == 2
        assert payload["tier_counts"]["Unscored"] == 1
        assert list(payload["tiers"].keys()) == [
            "Safety", "Target", "Reach", "FarReach", "Unscored",
        ]
        assert payload["profile"]["state_of_residence"] == "CA"

    def test_display_cap_keeps_full_counts(self, engine, applicant, school_factory):
        schools = [
            school_factory(f"s{i}", f"School {i:02d}", acceptance_rate=40.0)
            for i in range(5)
        ]

        response = engine.build_response(applicant, schools, [], max_results_per_tier=2)

        assert response.tier_counts[AdmissionTier.TARGET] == 5
        assert len(response.by_tier[AdmissionTier.TARGET]) == 2
        assert len(response.results) == 5
