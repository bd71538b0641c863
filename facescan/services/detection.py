"""Detector calls shared by scanning and enrollment."""
from typing import List, Optional

from facescan.core.logging import get_logger
from facescan.domain.entities.face import FaceObservation
from facescan.domain.interfaces.detection.face_detector import FaceDetector
from facescan.domain.value_objects.scanning import ScanImage

logger = get_logger(__name__)


async def detect_with_fallback(
    detector: FaceDetector,
    image: ScanImage,
    score_threshold: float,
    fallback_score_threshold: Optional[float] = None,
    min_side: Optional[int] = None,
) -> List[FaceObservation]:
    """Run the detector, retrying once with a lower score threshold if nothing is found.

    The second pass helps stage and crowd shots at the price of more spurious
    boxes, which the plausibility filter removes later.

    Raises:
        Whatever the detector raises; callers decide how to degrade.
    """
    observations = list(await detector.detect(image, score_threshold=score_threshold, min_side=min_side))
    if observations or fallback_score_threshold is None:
        return observations

    logger.debug(
        "No faces on first pass, retrying with fallback threshold",
        image_id=image.image_id,
        score_threshold=score_threshold,
        fallback_score_threshold=fallback_score_threshold
    )
    return list(await detector.detect(
        image, score_threshold=fallback_score_threshold, min_side=min_side
    ))
