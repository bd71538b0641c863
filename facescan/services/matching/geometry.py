"""
Coordinate remapping between detection, source and display surfaces.

Detection often runs on an upscaled copy of the source image so that small
faces in crowd shots are found. Boxes come back on that surface and must be
divided by the upscale factor before they mean anything on the source image;
previews then multiply by their own display factor.

All functions are pure. Scales are positive by construction; passing zero or a
negative scale is a programming error.
"""
import math

from facescan.domain.entities.face import BoundingBox, ImageDimensions

MIN_CROP_PAD_PX = 12
CROP_PAD_FRACTION = 0.18


def _check_scale(scale: float) -> None:
    if not scale > 0:
        raise ValueError(f"Scale must be positive, got {scale}")


def _scaled(box: BoundingBox, factor: float) -> BoundingBox:
    return BoundingBox(
        left=box.left * factor,
        top=box.top * factor,
        width=box.width * factor,
        height=box.height * factor,
    )


def to_source_space(box: BoundingBox, detection_scale: float) -> BoundingBox:
    """Map a detection-surface box back onto the source image."""
    _check_scale(detection_scale)
    return BoundingBox(
        left=box.left / detection_scale,
        top=box.top / detection_scale,
        width=box.width / detection_scale,
        height=box.height / detection_scale,
    )


def to_detection_space(box: BoundingBox, detection_scale: float) -> BoundingBox:
    """Map a source-image box onto the upscaled detection surface."""
    _check_scale(detection_scale)
    return _scaled(box, detection_scale)


def to_display_space(box: BoundingBox, display_scale: float) -> BoundingBox:
    """Map a source-image box onto a preview surface."""
    _check_scale(display_scale)
    return _scaled(box, display_scale)


def detection_scale_for(dimensions: ImageDimensions, target_min_side: float) -> float:
    """Upscale factor that brings the short side up to ``target_min_side``.

    Images already large enough are left at scale 1; they are never shrunk.
    """
    min_side = min(dimensions.width, dimensions.height)
    if min_side >= target_min_side:
        return 1.0
    return target_min_side / min_side


def display_scale_for(dimensions: ImageDimensions, max_width: float) -> float:
    """Downscale factor that fits the image into a preview of ``max_width``."""
    return min(1.0, max_width / dimensions.width)


def padded_crop_box(box: BoundingBox, dimensions: ImageDimensions) -> BoundingBox:
    """Padded, integer, image-clipped crop around a source-space face box.

    Used for enrollment thumbnails, which look better with some context around
    the face.
    """
    pad = max(MIN_CROP_PAD_PX, _round_half_up(min(box.width, box.height) * CROP_PAD_FRACTION))
    left = max(0, math.floor(box.left - pad))
    top = max(0, math.floor(box.top - pad))
    width = min(dimensions.width - left, math.floor(box.width + pad * 2))
    height = min(dimensions.height - top, math.floor(box.height + pad * 2))
    return BoundingBox(left=left, top=top, width=max(0, width), height=max(0, height))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
