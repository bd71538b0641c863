"""Tests for the enrollment service and the shared detection helper."""
from typing import List, Optional

import numpy as np
import pytest

from facescan.core.exceptions import DetectorError, ProfileImportError
from facescan.domain.entities.face import BoundingBox, ImageDimensions
from facescan.domain.value_objects.scanning import ScanImage
from facescan.infrastructure.detection import PrecomputedDetector
from facescan.infrastructure.storage import InMemoryProfileStore
from facescan.services.detection import detect_with_fallback
from facescan.services.face_enrollment import FaceEnrollmentService


class ThresholdLog(PrecomputedDetector):
    """Records the score threshold of every pass."""

    def __init__(self):
        self.thresholds: List[Optional[float]] = []

    async def detect(self, image, score_threshold=None, min_side=None):
        self.thresholds.append(score_threshold)
        return await super().detect(image, score_threshold, min_side)


@pytest.fixture
def photo(make_observation) -> ScanImage:
    """Enrollment photo with one face found on a 1.5x upscaled surface."""
    box = BoundingBox(left=150, top=75, width=150, height=180)
    return ScanImage(
        image_id="portrait.jpg",
        dimensions=ImageDimensions(width=600, height=400),
        payload=[make_observation([0.0, 0.0, 0.0, 0.1], box=box, scale=1.5)],
    )


class TestDetectWithFallback:
    """Test suite for the two-pass detector call."""

    async def test_single_pass_when_faces_found(self, photo):
        detector = ThresholdLog()
        found = await detect_with_fallback(detector, photo, 0.08, 0.04)
        assert len(found) == 1
        assert detector.thresholds == [0.08]

    async def test_retries_with_lower_threshold(self, make_observation, dimensions):
        faint = make_observation(np.zeros(4), score=0.05)
        image = ScanImage(image_id="stage.jpg", dimensions=dimensions, payload=[faint])
        detector = ThresholdLog()
        found = await detect_with_fallback(detector, image, 0.08, 0.04)
        assert found == [faint]
        assert detector.thresholds == [0.08, 0.04]

    async def test_no_retry_without_fallback(self, make_observation, dimensions):
        image = ScanImage(image_id="stage.jpg", dimensions=dimensions, payload=[])
        detector = ThresholdLog()
        assert await detect_with_fallback(detector, image, 0.08, None) == []
        assert detector.thresholds == [0.08]


class TestFaceEnrollmentService:
    """Test suite for enrollment flows."""

    async def test_candidates_have_source_and_crop_boxes(self, photo, profile_store):
        service = FaceEnrollmentService(PrecomputedDetector(), profile_store)
        candidates = await service.detect_candidates(photo)

        assert len(candidates) == 1
        candidate = candidates[0]
        assert candidate.index == 0
        assert candidate.source_box.left == pytest.approx(100)
        assert candidate.source_box.width == pytest.approx(100)
        assert candidate.crop_box.left == 82
        assert candidate.crop_box.top == 32

    async def test_candidates_capped(self, make_observation, dimensions, profile_store):
        image = ScanImage(
            image_id="group.jpg",
            dimensions=dimensions,
            payload=[make_observation(np.full(4, float(i))) for i in range(5)],
        )
        service = FaceEnrollmentService(PrecomputedDetector(), profile_store, max_faces=3)
        candidates = await service.detect_candidates(image)
        assert [c.index for c in candidates] == [0, 1, 2]

    async def test_detector_failure_propagates(self, dimensions, profile_store):
        service = FaceEnrollmentService(PrecomputedDetector(), profile_store)
        with pytest.raises(DetectorError):
            await service.detect_candidates(ScanImage(image_id="x.jpg", dimensions=dimensions))

    async def test_enroll_chosen_candidate(self, photo):
        store = InMemoryProfileStore()
        service = FaceEnrollmentService(PrecomputedDetector(), store)
        person = await store.create("Alice")
        candidates = await service.detect_candidates(photo)
        profile = await service.add_sample(person.id, candidates[0].observation.embedding)
        assert profile.sample_count == 1

    async def test_export_import_round_trip(self, profile_store):
        service = FaceEnrollmentService(PrecomputedDetector(), profile_store)
        exported = await service.export_people()

        target = InMemoryProfileStore()
        imported = await FaceEnrollmentService(PrecomputedDetector(), target).import_people(exported)
        assert [p.id for p in imported] == ["alice", "bob"]
        assert await target.selection() == {"alice": True, "bob": True}

    async def test_export_carries_selection(self, profile_store):
        await profile_store.set_selected("bob", False)
        exported = await FaceEnrollmentService(PrecomputedDetector(), profile_store).export_people()
        assert exported["selection"] == {"alice": True, "bob": False}

        target = InMemoryProfileStore()
        await FaceEnrollmentService(PrecomputedDetector(), target).import_people(exported)
        assert await target.selection() == {"alice": True, "bob": False}

    async def test_bad_import_leaves_store_untouched(self, profile_store):
        service = FaceEnrollmentService(PrecomputedDetector(), profile_store)
        with pytest.raises(ProfileImportError):
            await service.import_people({"version": 2, "people": [{"name": ""}]})
        assert len(await profile_store.list()) == 2
