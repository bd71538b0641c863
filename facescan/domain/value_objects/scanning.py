"""Batch scanning value objects."""
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from facescan.domain.entities.face import ImageDimensions
from facescan.domain.entities.profile import IdentityProfile
from facescan.domain.value_objects.recognition import FaceResult, ImageVerdict, Tier


class ScanImage(BaseModel):
    """An image queued for scanning.

    ``payload`` is whatever the detector needs (decoded pixels, a path, precomputed
    observations); the engine never looks inside it.
    """
    image_id: str = Field(..., description="Caller-side image identifier, e.g. a file name")
    dimensions: ImageDimensions = Field(..., description="Source image size in pixels")
    payload: Any = Field(None, description="Detector input", exclude=True)

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)


class ImageScanStatus(str, Enum):
    """How processing of one image ended."""
    OK = "ok"
    DETECTOR_FAILED = "detector_failed"
    FAILED = "failed"


class ImageScanResult(BaseModel):
    """Outcome of scanning a single image."""
    image_id: str = Field(..., description="Caller-side image identifier")
    dimensions: ImageDimensions = Field(..., description="Source image size in pixels")
    status: ImageScanStatus = Field(ImageScanStatus.OK, description="Processing status")
    verdict: Optional[ImageVerdict] = Field(None, description="Aggregated verdict, None if the image failed")
    faces: List[FaceResult] = Field(default_factory=list, description="Per-face detail")
    detected_count: int = Field(0, ge=0, description="Raw detector observations before filtering")
    error: Optional[str] = Field(None, description="Error message when status is not OK")

    @property
    def tier(self) -> Optional[Tier]:
        return self.verdict.tier if self.verdict else None


class ProfileSnapshot(BaseModel):
    """Immutable copy of the profile list and the selection taken at scan start."""
    profiles: Tuple[IdentityProfile, ...] = Field(default_factory=tuple)
    selection: Dict[str, bool] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class ScanReport(BaseModel):
    """All results of one batch, in input order."""
    results: List[ImageScanResult] = Field(default_factory=list)
    threshold: float = Field(..., description="FLAGGED distance cutoff used")
    possible_cutoff: float = Field(..., description="POSSIBLE distance cutoff used")
    cancelled: bool = Field(False, description="True if the batch was aborted early")

    def count(self, tier: Tier) -> int:
        return sum(1 for result in self.results if result.tier == tier)

    @property
    def preview_image_id(self) -> Optional[str]:
        """Image to preview first: first FLAGGED, else first POSSIBLE, else first CLEAR."""
        for tier in (Tier.FLAGGED, Tier.POSSIBLE, Tier.CLEAR):
            for result in self.results:
                if result.tier == tier:
                    return result.image_id
        return None

    def summary(self) -> str:
        prefix = "Cancelled" if self.cancelled else "Done"
        return (
            f"{prefix}. Flagged {self.count(Tier.FLAGGED)} • "
            f"Possible {self.count(Tier.POSSIBLE)} • Clear {self.count(Tier.CLEAR)}. "
            f"Threshold {self.threshold:.2f} (Possible up to {self.possible_cutoff:.2f})."
        )
