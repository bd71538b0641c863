"""Shared fixtures for face scanning tests."""
from typing import Callable, List, Optional, Sequence

import numpy as np
import pytest

from facescan.core.config import MatchingConfig
from facescan.domain.entities.face import BoundingBox, FaceObservation, ImageDimensions
from facescan.domain.entities.profile import IdentityProfile
from facescan.domain.value_objects.scanning import ScanImage
from facescan.infrastructure.storage import InMemoryProfileStore


def unit(index: int, dim: int = 4) -> np.ndarray:
    """Basis vector, handy for descriptors at known distances."""
    vector = np.zeros(dim)
    vector[index] = 1.0
    return vector


@pytest.fixture
def config() -> MatchingConfig:
    """Default matching thresholds: 0.60 flagged, 0.70 possible."""
    return MatchingConfig()


@pytest.fixture
def dimensions() -> ImageDimensions:
    return ImageDimensions(width=1000, height=800)


@pytest.fixture
def make_observation() -> Callable[..., FaceObservation]:
    """Factory for plausible observations around a descriptor."""

    def _make(
        embedding: Sequence[float],
        box: Optional[BoundingBox] = None,
        score: float = 0.9,
        scale: float = 1.0,
    ) -> FaceObservation:
        return FaceObservation(
            bounding_box=box or BoundingBox(left=100, top=100, width=80 * scale, height=100 * scale),
            detector_score=score,
            embedding=embedding,
            detection_scale=scale,
        )

    return _make


@pytest.fixture
def make_image(dimensions) -> Callable[..., ScanImage]:
    """Factory for scan images carrying precomputed observations."""

    def _make(image_id: str, observations: Optional[List[FaceObservation]] = None) -> ScanImage:
        return ScanImage(image_id=image_id, dimensions=dimensions, payload=observations)

    return _make


@pytest.fixture
def alice() -> IdentityProfile:
    return IdentityProfile(id="alice", name="Alice", samples=[np.zeros(4)])


@pytest.fixture
def bob() -> IdentityProfile:
    return IdentityProfile(id="bob", name="Bob", samples=[unit(0)])


@pytest.fixture
def profile_store(alice, bob) -> InMemoryProfileStore:
    """Store with Alice and Bob enrolled and both selected."""
    return InMemoryProfileStore([alice, bob])
