"""
Plausibility filter for raw detector output.

A small face detector run with a low score threshold on upscaled, noisy or
crowded images also returns limbs, torsos and texture patches. These checks
drop such boxes before they reach matching or previews.
"""
from typing import Iterable, List

from facescan.core.config import MatchingConfig
from facescan.core.logging import get_logger
from facescan.domain.entities.face import FaceObservation, ImageDimensions
from facescan.services.matching.geometry import to_source_space

logger = get_logger(__name__)


def is_plausible(
    observation: FaceObservation,
    dimensions: ImageDimensions,
    config: MatchingConfig,
) -> bool:
    """Return True if the observation looks like a real face.

    Sizes are measured on the source image, after undoing the detection upscale.
    """
    if observation.detector_score < config.min_det_score:
        return False

    box = to_source_space(observation.bounding_box, observation.detection_scale)
    if min(box.width, box.height) < config.min_face_px:
        return False

    if not config.min_aspect_ratio <= box.aspect_ratio <= config.max_aspect_ratio:
        return False

    if box.width > config.max_face_area_fraction * dimensions.width:
        return False
    if box.height > config.max_face_area_fraction * dimensions.height:
        return False

    return True


def filter_observations(
    observations: Iterable[FaceObservation],
    dimensions: ImageDimensions,
    config: MatchingConfig,
) -> List[FaceObservation]:
    """Keep plausible observations, capped at ``config.max_faces_per_image``.

    Detector order is preserved and the earliest observations are kept when the
    cap is hit.
    """
    accepted: List[FaceObservation] = []
    rejected = 0
    dropped = 0
    for observation in observations:
        if not is_plausible(observation, dimensions, config):
            rejected += 1
            continue
        if len(accepted) >= config.max_faces_per_image:
            dropped += 1
            continue
        accepted.append(observation)

    if rejected or dropped:
        logger.debug(
            "Filtered detector observations",
            accepted=len(accepted),
            rejected=rejected,
            dropped_over_cap=dropped,
            max_faces=config.max_faces_per_image
        )
    return accepted
