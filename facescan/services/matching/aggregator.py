"""Per-image aggregation of face match results."""
from typing import Dict, Iterable, List, Optional, Tuple

from facescan.domain.entities.face import FaceObservation
from facescan.domain.value_objects.recognition import FaceResult, ImageVerdict, MatchResult, Tier


def dedupe_by_identity(matches: Iterable[MatchResult]) -> List[MatchResult]:
    """Keep the closest match per identity, ordered by ascending distance.

    On equal distances the first occurrence is kept and order of first
    appearance is preserved.
    """
    best: Dict[str, MatchResult] = {}
    for match in matches:
        previous = best.get(match.identity_id)
        if previous is None or match.distance < previous.distance:
            best[match.identity_id] = match
    return sorted(best.values(), key=lambda item: item.distance)


def aggregate(pairs: Iterable[Tuple[FaceObservation, Optional[MatchResult]]]) -> ImageVerdict:
    """Combine per-face matches into one verdict; the worst tier wins.

    Faces without a match count toward ``face_count`` only. No faces at all
    gives a CLEAR verdict with ``face_count`` 0.
    """
    face_count = 0
    matches: List[MatchResult] = []
    tier = Tier.CLEAR
    for _observation, match in pairs:
        face_count += 1
        if match is None:
            continue
        matches.append(match)
        if match.tier.severity > tier.severity:
            tier = match.tier

    return ImageVerdict(
        tier=tier,
        matched_identities=dedupe_by_identity(matches),
        face_count=face_count,
    )


def aggregate_faces(faces: Iterable[FaceResult]) -> ImageVerdict:
    """Aggregate from per-face results as produced by ``FaceMatcher``."""
    return aggregate((face.observation, face.best_match) for face in faces)
