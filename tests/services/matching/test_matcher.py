"""Tests for tiered nearest-identity matching."""
import numpy as np
import pytest

from facescan.core.exceptions import EmptyIdentityPoolError, NoActiveIdentitiesError
from facescan.domain.entities.profile import IdentityProfile
from facescan.domain.value_objects.recognition import Tier
from facescan.services.matching.aggregator import aggregate_faces
from facescan.services.matching.matcher import (
    FaceMatcher,
    classify,
    distance_to_confidence,
    match,
    rank_candidates,
)


def query_at(distance: float) -> np.ndarray:
    """Descriptor ``distance`` away from Alice's zero sample, far from Bob's."""
    return np.array([0.0, 0.0, 0.0, distance])


class TestClassify:
    """Test suite for distance tiers."""

    @pytest.mark.parametrize("distance,expected", [
        (0.0, Tier.FLAGGED),
        (0.60, Tier.FLAGGED),
        (0.65, Tier.POSSIBLE),
        (0.70, Tier.POSSIBLE),
        (0.71, Tier.CLEAR),
    ])
    def test_boundaries(self, distance, expected):
        assert classify(distance, 0.60, 0.10) == expected

    def test_zero_band_is_binary(self):
        assert classify(0.60, 0.60, 0.0) == Tier.FLAGGED
        assert classify(0.6001, 0.60, 0.0) == Tier.CLEAR


class TestConfidence:
    """Test suite for the display confidence."""

    def test_zero_distance_is_full_confidence(self):
        assert distance_to_confidence(0.0, 0.60, 0.10) == 100

    def test_decays_to_zero_past_the_margin(self):
        assert distance_to_confidence(0.95, 0.60, 0.10) == 0
        assert distance_to_confidence(5.0, 0.60, 0.10) == 0

    def test_known_values(self):
        # ceiling = 0.60 + 0.10 + 0.25 = 0.95
        assert distance_to_confidence(0.50, 0.60, 0.10) == 47
        assert distance_to_confidence(0.60, 0.60, 0.10) == 37

    def test_monotonic_in_distance(self):
        scores = [distance_to_confidence(d / 100, 0.60, 0.10) for d in range(0, 120)]
        assert scores == sorted(scores, reverse=True)


class TestMatch:
    """Test suite for picking the best identity."""

    def test_close_face_is_flagged(self, make_observation, alice, bob):
        result = match(make_observation(query_at(0.50)), [alice, bob], 0.60, 0.10)
        assert result is not None
        assert result.identity_id == "alice"
        assert result.tier == Tier.FLAGGED
        assert result.distance == pytest.approx(0.50)
        assert result.confidence == 47

    def test_band_face_is_possible(self, make_observation, alice, bob):
        result = match(make_observation(query_at(0.65)), [alice, bob], 0.60, 0.10)
        assert result.tier == Tier.POSSIBLE
        assert result.name == "Alice"

    def test_distant_face_has_no_match(self, make_observation, alice, bob):
        assert match(make_observation(query_at(0.80)), [alice, bob], 0.60, 0.10) is None

    def test_zero_band_drops_possible(self, make_observation, alice, bob):
        assert match(make_observation(query_at(0.65)), [alice, bob], 0.60, 0.0) is None

    def test_nearest_identity_wins(self, make_observation, alice, bob):
        # 0.3 from Bob's sample, 0.7 from Alice's
        result = match(make_observation(np.array([0.7, 0.0, 0.0, 0.0])), [alice, bob], 0.60, 0.10)
        assert result.identity_id == "bob"
        assert result.distance == pytest.approx(0.3)

    def test_tie_goes_to_first_profile(self, make_observation):
        first = IdentityProfile(id="first", name="Twin A", samples=[[0.0, 0.0, 0.0, 0.0]])
        second = IdentityProfile(id="second", name="Twin B", samples=[[0.0, 0.0, 0.0, 0.0]])
        observation = make_observation(query_at(0.2))
        assert match(observation, [first, second], 0.60, 0.10).identity_id == "first"
        assert match(observation, [second, first], 0.60, 0.10).identity_id == "second"

    def test_identity_without_samples_never_matches(self, make_observation, alice):
        empty = IdentityProfile(id="empty", name="Empty")
        result = match(make_observation(np.zeros(4)), [empty, alice], 0.60, 0.10)
        assert result.identity_id == "alice"

    def test_no_active_identities_refused(self, make_observation):
        with pytest.raises(NoActiveIdentitiesError):
            match(make_observation(np.zeros(4)), [], 0.60, 0.10)

    def test_pool_without_samples_refused(self, make_observation):
        with pytest.raises(EmptyIdentityPoolError):
            match(make_observation(np.zeros(4)), [IdentityProfile(name="Empty")], 0.60, 0.10)


class TestRankCandidates:
    """Test suite for the candidate list."""

    def test_sorted_by_distance_within_cutoff(self, make_observation, alice, bob):
        carol = IdentityProfile(id="carol", name="Carol", samples=[[0.0, 0.0, 0.0, 0.9]])
        candidates = rank_candidates(
            make_observation(np.array([0.0, 0.0, 0.0, 0.4])), [alice, bob, carol], 0.60, 0.10
        )
        assert [c.identity_id for c in candidates] == ["alice", "carol"]
        assert [c.tier for c in candidates] == [Tier.FLAGGED, Tier.FLAGGED]


class TestFaceMatcher:
    """Test suite for the configured matcher."""

    def test_rejects_empty_pool_upfront(self, config):
        with pytest.raises(NoActiveIdentitiesError):
            FaceMatcher([], config)

    def test_face_result_carries_source_box(self, make_observation, alice, config):
        matcher = FaceMatcher([alice], config)
        face = matcher.match_face(make_observation(query_at(0.5), scale=2.0))
        assert face.tier == Tier.FLAGGED
        assert face.source_box.width == pytest.approx(80)
        assert face.source_box.height == pytest.approx(100)
        assert face.candidates[0] == face.best_match

    def test_uses_configured_thresholds(self, make_observation, alice, config):
        strict = FaceMatcher([alice], config.with_overrides(threshold=0.4, possible_band=0.0))
        assert strict.match_face(make_observation(query_at(0.5))).best_match is None


class TestMatchingProperties:
    """Test suite for end-to-end matching properties."""

    @pytest.mark.parametrize("distance,expected", [
        (0.50, Tier.FLAGGED),
        (0.60, Tier.POSSIBLE),
        (0.80, None),
    ])
    def test_alice_scenario(self, make_observation, alice, bob, distance, expected):
        result = match(make_observation(query_at(distance)), [alice, bob], 0.55, 0.10)
        assert (result.tier if result else None) == expected

    def test_raising_threshold_never_unflags(self, make_observation, alice, bob, config):
        observations = [make_observation(query_at(d / 20)) for d in range(20)]
        tiers_by_threshold = []
        for threshold in (0.2, 0.4, 0.6, 0.8):
            matcher = FaceMatcher([alice, bob], config.with_overrides(threshold=threshold))
            tiers_by_threshold.append([matcher.match_face(o).tier for o in observations])

        for tiers in zip(*tiers_by_threshold):
            severities = [tier.severity for tier in tiers]
            assert severities == sorted(severities)
        flagged_counts = [tiers.count(Tier.FLAGGED) for tiers in tiers_by_threshold]
        assert flagged_counts[0] < flagged_counts[-1]

    def test_match_and_aggregate_are_idempotent(self, make_observation, alice, bob, config):
        matcher = FaceMatcher([alice, bob], config)
        observations = [make_observation(query_at(0.3)), make_observation(np.array([0.9, 0.0, 0.0, 0.0]))]
        first = aggregate_faces([matcher.match_face(o) for o in observations])
        second = aggregate_faces([matcher.match_face(o) for o in observations])
        assert first == second
        assert [m.identity_id for m in first.matched_identities] == ["bob", "alice"]
