"""
Tiered nearest-identity matcher.

Each face is compared with every active identity; the identity whose closest
sample is nearest wins. Its distance decides the tier:

    distance <= threshold                  -> FLAGGED
    distance <= threshold + possible_band  -> POSSIBLE
    otherwise                              -> no match (CLEAR)

A ``possible_band`` of 0 gives a plain two-way MATCHED/CLEAR matcher.

When several identities are exactly equidistant, the one listed first in the
profile order wins.

Confidence is a display affordance: a linear decay from 100 at distance 0 to 0
at ``threshold + possible_band + margin``. It is not a calibrated probability.
"""
import math
from typing import List, Optional, Sequence

from facescan.core.config import MatchingConfig
from facescan.core.exceptions import EmptyIdentityPoolError, NoActiveIdentitiesError
from facescan.domain.entities.face import FaceObservation
from facescan.domain.entities.profile import IdentityProfile
from facescan.domain.value_objects.recognition import FaceResult, MatchResult, Tier
from facescan.services.matching.distance import best_distance_to_identity
from facescan.services.matching.geometry import to_source_space

DEFAULT_CONFIDENCE_MARGIN = 0.25


def ensure_pool_ready(identities: Sequence[IdentityProfile]) -> None:
    """Refuse to match against an empty identity pool.

    Raises:
        NoActiveIdentitiesError: If no identity is active
        EmptyIdentityPoolError: If the active identities hold no samples at all
    """
    if not identities:
        raise NoActiveIdentitiesError("No selected people to scan against")
    total_samples = sum(identity.sample_count for identity in identities)
    if total_samples == 0:
        raise EmptyIdentityPoolError(
            "Selected people have no samples",
            details={"identities": len(identities)}
        )


def distance_to_confidence(
    distance: float,
    threshold: float,
    possible_band: float,
    margin: float = DEFAULT_CONFIDENCE_MARGIN,
) -> int:
    """Map a distance to a 0-100 score for display (rounded half up)."""
    ceiling = threshold + possible_band + margin
    clamped = max(0.0, min(1.0, 1.0 - distance / ceiling))
    return math.floor(clamped * 100 + 0.5)


def classify(distance: float, threshold: float, possible_band: float) -> Tier:
    """Tier for a single distance."""
    if distance <= threshold:
        return Tier.FLAGGED
    if distance <= threshold + possible_band:
        return Tier.POSSIBLE
    return Tier.CLEAR


def rank_candidates(
    observation: FaceObservation,
    active_identities: Sequence[IdentityProfile],
    threshold: float,
    possible_band: float,
    margin: float = DEFAULT_CONFIDENCE_MARGIN,
) -> List[MatchResult]:
    """All identities within the possible cutoff, closest first.

    Identities without samples are skipped. The sort is stable, so equal
    distances keep profile order.

    Raises:
        NoActiveIdentitiesError: If ``active_identities`` is empty
        EmptyIdentityPoolError: If no active identity has a sample
        EmbeddingMismatchError: If a stored sample has the wrong length
    """
    ensure_pool_ready(active_identities)

    candidates: List[MatchResult] = []
    for identity in active_identities:
        distance = best_distance_to_identity(observation.embedding, identity)
        if math.isinf(distance):
            continue
        tier = classify(distance, threshold, possible_band)
        if tier == Tier.CLEAR:
            continue
        candidates.append(MatchResult(
            identity_id=identity.id,
            name=identity.name,
            distance=distance,
            confidence=distance_to_confidence(distance, threshold, possible_band, margin),
            tier=tier,
        ))

    candidates.sort(key=lambda candidate: candidate.distance)
    return candidates


def match(
    observation: FaceObservation,
    active_identities: Sequence[IdentityProfile],
    threshold: float,
    possible_band: float,
    margin: float = DEFAULT_CONFIDENCE_MARGIN,
) -> Optional[MatchResult]:
    """Best identity for one face, or None when nobody is within the cutoff."""
    candidates = rank_candidates(observation, active_identities, threshold, possible_band, margin)
    return candidates[0] if candidates else None


class FaceMatcher:
    """Matches faces against a fixed identity pool with one configuration.

    Example:
        ```python
        matcher = FaceMatcher(active_identities, MatchingConfig(threshold=0.55))
        face_result = matcher.match_face(observation)
        ```
    """

    def __init__(self, identities: Sequence[IdentityProfile], config: MatchingConfig) -> None:
        """Validate the pool once so per-face calls cannot hit an empty pool.

        Raises:
            ScanPreconditionError: If the pool is empty or has no samples
        """
        ensure_pool_ready(identities)
        self.identities = tuple(identities)
        self.config = config

    def match_face(self, observation: FaceObservation) -> FaceResult:
        """Match one observation and keep the detail needed for previews."""
        candidates = rank_candidates(
            observation,
            self.identities,
            self.config.threshold,
            self.config.possible_band,
            self.config.confidence_margin,
        )
        return FaceResult(
            observation=observation,
            source_box=to_source_space(observation.bounding_box, observation.detection_scale),
            best_match=candidates[0] if candidates else None,
            candidates=candidates,
        )
