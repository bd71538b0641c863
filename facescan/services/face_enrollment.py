"""Face enrollment service for building the people list."""
from typing import Any, Dict, List, Optional

from facescan.core.config import settings
from facescan.core.exceptions import ProfileImportError
from facescan.core.logging import get_logger
from facescan.domain.entities.face import Embedding
from facescan.domain.entities.profile import IdentityProfile
from facescan.domain.interfaces.detection.face_detector import FaceDetector
from facescan.domain.interfaces.storage.profile_store import ProfileStore
from facescan.domain.value_objects.recognition import EnrollmentCandidate
from facescan.domain.value_objects.scanning import ScanImage
from facescan.infrastructure.storage.documents import export_people, parse_people
from facescan.services.detection import detect_with_fallback
from facescan.services.matching.geometry import padded_crop_box, to_source_space

logger = get_logger(__name__)


class FaceEnrollmentService:
    """Service for enrolling people and their face samples.

    Enrollment is the only path that mutates the profile store; scans read a
    snapshot and never write.

    Example:
        ```python
        enrollment = FaceEnrollmentService(detector, profile_store)
        alice = await enrollment.profile_store.create("Alice")
        candidates = await enrollment.detect_candidates(photo)
        await enrollment.add_sample(alice.id, candidates[0].observation.embedding)
        ```
    """

    def __init__(
        self,
        detector: FaceDetector,
        profile_store: ProfileStore,
        enroll_min_side: int = settings.ENROLL_MIN_SIDE,
        score_threshold: float = settings.DETECTOR_SCORE_THRESHOLD,
        fallback_score_threshold: Optional[float] = settings.DETECTOR_FALLBACK_SCORE_THRESHOLD,
        max_faces: int = settings.MAX_FACES_PER_IMAGE,
    ) -> None:
        """Initialize the face enrollment service.

        Args:
            detector: External face detector and embedder
            profile_store: Store receiving new people and samples
            enroll_min_side: Short side photos are upscaled to before detection
            score_threshold: Detector score threshold for the first pass
            fallback_score_threshold: Threshold for the retry pass, None disables it
            max_faces: Candidates offered per photo
        """
        self.detector = detector
        self.profile_store = profile_store
        self.enroll_min_side = enroll_min_side
        self.score_threshold = score_threshold
        self.fallback_score_threshold = fallback_score_threshold
        self.max_faces = max_faces

    async def detect_candidates(self, image: ScanImage) -> List[EnrollmentCandidate]:
        """Find faces in an enrollment photo, each with a crop box for its thumbnail.

        Returns an empty list when nothing is found, e.g. a blurry or tiny photo.

        Raises:
            DetectorError: If the detector fails on the photo
        """
        observations = await detect_with_fallback(
            self.detector,
            image,
            score_threshold=self.score_threshold,
            fallback_score_threshold=self.fallback_score_threshold,
            min_side=self.enroll_min_side,
        )
        candidates = []
        for index, observation in enumerate(observations[:self.max_faces]):
            source_box = to_source_space(observation.bounding_box, observation.detection_scale)
            candidates.append(EnrollmentCandidate(
                index=index,
                observation=observation,
                source_box=source_box,
                crop_box=padded_crop_box(source_box, image.dimensions),
            ))

        logger.info(
            "Detected enrollment candidates",
            image_id=image.image_id,
            faces_count=len(candidates),
            detected_count=len(observations)
        )
        return candidates

    async def add_sample(self, profile_id: str, embedding: Embedding) -> IdentityProfile:
        """Add a chosen descriptor to a person.

        Raises:
            ProfileNotFoundError: If the person does not exist
        """
        return await self.profile_store.add_sample(profile_id, embedding)

    async def export_people(self) -> Dict[str, Any]:
        """Export all people as a versioned JSON-ready document."""
        snapshot = await self.profile_store.snapshot()
        logger.info("Exporting people", profiles_count=len(snapshot.profiles))
        return export_people(snapshot.profiles, snapshot.selection)

    async def import_people(self, data: Any) -> List[IdentityProfile]:
        """Replace the people list with an exported document.

        Flags carried by the document are applied. Other previously known ids
        keep their flag and new ids start selected.

        Raises:
            ProfileImportError: If the document is malformed
        """
        try:
            document = parse_people(data)
        except ProfileImportError as e:
            logger.error("Import failed", error=str(e))
            raise
        await self.profile_store.replace_all(document.people, document.selection)
        logger.info("Imported people", profiles_count=len(document.people), version=document.version)
        return await self.profile_store.list()
