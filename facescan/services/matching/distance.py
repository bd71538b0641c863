"""Euclidean distance between face descriptors."""
import math

import numpy as np

from facescan.core.exceptions import EmbeddingMismatchError
from facescan.domain.entities.face import Embedding
from facescan.domain.entities.profile import IdentityProfile


def _check_shapes(a: np.ndarray, b: np.ndarray) -> None:
    if a.shape != b.shape:
        raise EmbeddingMismatchError(
            "Embedding shapes do not match",
            details={"query_shape": a.shape, "sample_shape": b.shape}
        )


def euclidean_distance(a: Embedding, b: Embedding) -> float:
    """Euclidean distance between two descriptors of the same length.

    Raises:
        EmbeddingMismatchError: If the descriptors have different lengths
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    _check_shapes(a, b)
    return float(np.linalg.norm(a - b))


def best_distance_to_identity(query: Embedding, identity: IdentityProfile) -> float:
    """Smallest distance from ``query`` to any sample of ``identity``.

    Returns ``math.inf`` when the identity has no samples. Every sample is
    checked, so a single corrupted sample fails the comparison instead of being
    skipped.

    Raises:
        EmbeddingMismatchError: If any sample length differs from the query
    """
    if not identity.samples:
        return math.inf
    query = np.asarray(query, dtype=np.float64)
    for sample in identity.samples:
        _check_shapes(query, sample)
    stacked = np.stack(identity.samples, axis=0)
    return float(np.linalg.norm(stacked - query, axis=1).min())
