"""Core face domain entities."""
from typing import Any, Sequence, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

Embedding = np.ndarray


def as_embedding(value: Union[np.ndarray, Sequence[float]]) -> Embedding:
    """Convert a descriptor to a read-only 1-D float vector.

    Raises:
        ValueError: If the descriptor is empty or not one-dimensional
    """
    arr = np.array(value, dtype=np.float64)
    if arr.ndim != 1 or arr.size == 0:
        raise ValueError(f"Embedding must be a non-empty 1-D vector, got shape {arr.shape}")
    arr.setflags(write=False)
    return arr


class BoundingBox(BaseModel):
    """Face bounding box coordinates in pixels of some surface."""
    left: float = Field(..., description="Left coordinate of the bounding box")
    top: float = Field(..., description="Top coordinate of the bounding box")
    width: float = Field(..., ge=0, description="Width of the bounding box")
    height: float = Field(..., ge=0, description="Height of the bounding box")

    model_config = ConfigDict(frozen=True)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def aspect_ratio(self) -> float:
        """Width over height; infinite for a zero-height box."""
        if self.height == 0:
            return float("inf")
        return self.width / self.height


class ImageDimensions(BaseModel):
    """Pixel size of a source image."""
    width: float = Field(..., gt=0, description="Image width in pixels")
    height: float = Field(..., gt=0, description="Image height in pixels")

    model_config = ConfigDict(frozen=True)


class FaceObservation(BaseModel):
    """One raw face reported by the detector.

    ``bounding_box`` is expressed on the detection surface, which may be an
    upscaled copy of the source image. ``detection_scale`` is that upscale factor.
    """
    bounding_box: BoundingBox = Field(..., description="Box on the detection surface")
    detector_score: float = Field(..., ge=0, le=1, description="Detector confidence score")
    embedding: Embedding = Field(..., description="Face descriptor vector")
    detection_scale: float = Field(1.0, gt=0, description="Upscale applied before detection")

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @field_validator('embedding', mode='before')
    @classmethod
    def validate_embedding(cls, v: Any) -> Embedding:
        """Validate and convert embedding to a read-only numpy array."""
        return as_embedding(v)

    @field_serializer('embedding')
    def serialize_embedding(self, v: Embedding) -> list:
        return v.tolist()
