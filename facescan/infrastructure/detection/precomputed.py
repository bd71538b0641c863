"""Detector adapter for observations computed outside this process.

The browser or an edge device runs the face model and posts observations; this
adapter hands them to the engine as if a detector had produced them.
"""
from typing import Iterable, List, Optional

from pydantic import ValidationError

from facescan.core.exceptions import DetectorError
from facescan.core.logging import get_logger
from facescan.domain.entities.face import FaceObservation
from facescan.domain.interfaces.detection.face_detector import FaceDetector
from facescan.domain.value_objects.scanning import ScanImage

logger = get_logger(__name__)


class PrecomputedDetector(FaceDetector):
    """Reads observations from ``ScanImage.payload``.

    The payload is a list of ``FaceObservation`` objects or of dicts in the same
    shape. The score threshold is applied here as a real detector would.
    """

    async def detect(
        self,
        image: ScanImage,
        score_threshold: Optional[float] = None,
        min_side: Optional[int] = None,
    ) -> Iterable[FaceObservation]:
        """Return the stored observations scoring at least ``score_threshold``.

        ``min_side`` is ignored: the upscale already happened upstream and is
        recorded on each observation.

        Raises:
            DetectorError: If the payload is missing or malformed
        """
        if image.payload is None:
            raise DetectorError(
                "No observations supplied for image",
                details={"image_id": image.image_id}
            )
        try:
            observations: List[FaceObservation] = [
                item if isinstance(item, FaceObservation) else FaceObservation.model_validate(item)
                for item in image.payload
            ]
        except (TypeError, ValidationError) as e:
            logger.error("Malformed observations", image_id=image.image_id, error=str(e))
            raise DetectorError(f"Malformed observations: {e}") from e

        if score_threshold is None:
            return observations
        return [o for o in observations if o.detector_score >= score_threshold]
