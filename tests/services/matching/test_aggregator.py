"""Tests for per-image aggregation."""
import numpy as np

from facescan.domain.value_objects.recognition import ImageVerdict, MatchResult, Tier
from facescan.services.matching.aggregator import aggregate, dedupe_by_identity


def result(identity_id: str, distance: float, tier: Tier, confidence: int = 50) -> MatchResult:
    return MatchResult(
        identity_id=identity_id,
        name=identity_id.title(),
        distance=distance,
        confidence=confidence,
        tier=tier,
    )


class TestAggregate:
    """Test suite for image verdicts."""

    def test_no_faces_is_clear(self):
        verdict = aggregate([])
        assert verdict.tier == Tier.CLEAR
        assert verdict.face_count == 0
        assert verdict.matched_identities == []

    def test_unmatched_faces_are_counted(self, make_observation):
        pairs = [(make_observation(np.zeros(4)), None), (make_observation(np.ones(4)), None)]
        verdict = aggregate(pairs)
        assert verdict.tier == Tier.CLEAR
        assert verdict.face_count == 2

    def test_worst_tier_wins(self, make_observation):
        obs = make_observation(np.zeros(4))
        verdict = aggregate([
            (obs, result("bob", 0.65, Tier.POSSIBLE)),
            (obs, result("alice", 0.40, Tier.FLAGGED)),
            (obs, None),
        ])
        assert verdict.tier == Tier.FLAGGED
        assert verdict.face_count == 3

    def test_possible_only(self, make_observation):
        obs = make_observation(np.zeros(4))
        verdict = aggregate([(obs, result("bob", 0.65, Tier.POSSIBLE))])
        assert verdict.tier == Tier.POSSIBLE

    def test_same_identity_twice_keeps_closest(self, make_observation):
        obs = make_observation(np.zeros(4))
        verdict = aggregate([
            (obs, result("alice", 0.5, Tier.FLAGGED)),
            (obs, result("alice", 0.3, Tier.FLAGGED)),
        ])
        assert len(verdict.matched_identities) == 1
        assert verdict.matched_identities[0].distance == 0.3


class TestDedupe:
    """Test suite for identity de-duplication."""

    def test_sorted_ascending(self):
        deduped = dedupe_by_identity([
            result("carol", 0.55, Tier.FLAGGED),
            result("alice", 0.20, Tier.FLAGGED),
            result("bob", 0.68, Tier.POSSIBLE),
        ])
        assert [m.identity_id for m in deduped] == ["alice", "carol", "bob"]

    def test_idempotent(self):
        matches = [
            result("alice", 0.5, Tier.FLAGGED),
            result("bob", 0.3, Tier.FLAGGED),
            result("alice", 0.2, Tier.FLAGGED),
        ]
        once = dedupe_by_identity(matches)
        assert dedupe_by_identity(once) == once


class TestDescribe:
    """Test suite for verdict labels."""

    def test_clear_label(self):
        assert ImageVerdict(tier=Tier.CLEAR, face_count=2).describe() == "—"

    def test_top_matches_with_overflow(self):
        verdict = ImageVerdict(
            tier=Tier.FLAGGED,
            face_count=5,
            matched_identities=[
                result("alice", 0.1, Tier.FLAGGED, 87),
                result("bob", 0.3, Tier.FLAGGED, 61),
                result("carol", 0.4, Tier.FLAGGED, 50),
                result("dave", 0.5, Tier.FLAGGED, 45),
                result("erin", 0.6, Tier.FLAGGED, 37),
            ],
        )
        assert verdict.describe(top_n=2) == "Alice (87%), Bob (61%) +3"

    def test_flagged_label_omits_possible_identities(self):
        verdict = ImageVerdict(
            tier=Tier.FLAGGED,
            face_count=2,
            matched_identities=[
                result("alice", 0.5, Tier.FLAGGED, 47),
                result("bob", 0.65, Tier.POSSIBLE, 32),
            ],
        )
        assert verdict.describe() == "Alice (47%)"
