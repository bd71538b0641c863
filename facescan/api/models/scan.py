"""API models for scanning images."""
from typing import List, Optional

from pydantic import BaseModel, Field

from facescan.core.config import MatchingConfig, settings
from facescan.domain.entities.face import BoundingBox, ImageDimensions
from facescan.domain.value_objects.recognition import FaceResult, MatchResult, Tier
from facescan.domain.value_objects.scanning import (
    ImageScanResult,
    ImageScanStatus,
    ScanImage,
    ScanReport,
)
from facescan.services.matching.geometry import display_scale_for, to_display_space


class ObservationPayload(BaseModel):
    """One face as reported by the client-side detector."""
    bounding_box: BoundingBox = Field(..., description="Box on the detection surface")
    detector_score: float = Field(..., ge=0, le=1, description="Detector confidence score")
    embedding: List[float] = Field(..., min_length=1, description="Face descriptor vector")
    detection_scale: float = Field(1.0, gt=0, description="Upscale applied before detection")


class ScanImagePayload(BaseModel):
    """An image to scan, carried as its detector output."""
    image_id: str = Field(..., min_length=1, max_length=1024, description="Image identifier, e.g. file name")
    width: float = Field(..., gt=0, description="Source image width in pixels")
    height: float = Field(..., gt=0, description="Source image height in pixels")
    observations: Optional[List[ObservationPayload]] = Field(
        None,
        description="Detector output; null means the detector failed on this image"
    )

    def to_scan_image(self) -> ScanImage:
        payload = None
        if self.observations is not None:
            payload = [observation.model_dump() for observation in self.observations]
        return ScanImage(
            image_id=self.image_id,
            dimensions=ImageDimensions(width=self.width, height=self.height),
            payload=payload,
        )


class ScanRequest(BaseModel):
    """Request model for the /scan endpoint. Unset thresholds use server settings."""
    images: List[ScanImagePayload] = Field(..., min_length=1, description="Images in display order")
    threshold: Optional[float] = Field(None, gt=0, description="Distance cutoff for FLAGGED")
    possible_band: Optional[float] = Field(None, ge=0, description="Extra distance for POSSIBLE")
    min_det_score: Optional[float] = Field(None, ge=0, le=1)
    min_face_px: Optional[float] = Field(None, ge=0)
    min_aspect_ratio: Optional[float] = Field(None, gt=0)
    max_aspect_ratio: Optional[float] = Field(None, gt=0)
    max_face_area_fraction: Optional[float] = Field(None, gt=0, le=1)
    max_faces_per_image: Optional[int] = Field(None, gt=0)

    def apply_to(self, config: MatchingConfig) -> MatchingConfig:
        """Overlay the request's thresholds on the server configuration."""
        return config.with_overrides(**self.model_dump(exclude={"images"}))


class FaceResponse(BaseModel):
    """API model for one evaluated face."""
    source_box: BoundingBox = Field(..., description="Box in source image coordinates")
    display_box: BoundingBox = Field(..., description="Box on the preview surface")
    detector_score: float = Field(..., description="Detector confidence score")
    tier: Tier = Field(..., description="Tier of this face")
    best_match: Optional[MatchResult] = Field(None, description="Closest identity, if any")
    candidates: List[MatchResult] = Field(default_factory=list, description="All identities within the cutoff")

    @classmethod
    def from_face(cls, face: FaceResult, display_scale: float = 1.0) -> "FaceResponse":
        return cls(
            source_box=face.source_box,
            display_box=to_display_space(face.source_box, display_scale),
            detector_score=face.observation.detector_score,
            tier=face.tier,
            best_match=face.best_match,
            candidates=face.candidates,
        )


class ImageResponse(BaseModel):
    """API model for one scanned image."""
    image_id: str
    status: ImageScanStatus
    tier: Optional[Tier] = None
    face_count: int = 0
    detected_count: int = 0
    label: str = Field("—", description="Top matches, e.g. 'Alice (87%), Bob (61%) +2'")
    display_scale: float = Field(1.0, gt=0, description="Preview scale applied to display boxes")
    matched_identities: List[MatchResult] = Field(default_factory=list)
    faces: List[FaceResponse] = Field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def from_result(
        cls,
        result: ImageScanResult,
        top_n: int,
        preview_max_width: float = settings.PREVIEW_MAX_WIDTH,
    ) -> "ImageResponse":
        verdict = result.verdict
        display_scale = display_scale_for(result.dimensions, preview_max_width)
        return cls(
            image_id=result.image_id,
            status=result.status,
            tier=verdict.tier if verdict else None,
            face_count=verdict.face_count if verdict else 0,
            detected_count=result.detected_count,
            label=verdict.describe(top_n) if verdict else "—",
            matched_identities=verdict.matched_identities if verdict else [],
            display_scale=display_scale,
            faces=[FaceResponse.from_face(face, display_scale) for face in result.faces],
            error=result.error,
        )


class ScanResponse(BaseModel):
    """Response model for the /scan endpoint."""
    images: List[ImageResponse] = Field(..., description="Results in request order")
    flagged: int = Field(..., ge=0)
    possible: int = Field(..., ge=0)
    clear: int = Field(..., ge=0)
    preview_image_id: Optional[str] = Field(None, description="Image to preview first")
    summary: str = Field(..., description="Human readable completion line")

    @classmethod
    def from_report(cls, report: ScanReport, top_n: int = 3) -> "ScanResponse":
        return cls(
            images=[ImageResponse.from_result(result, top_n) for result in report.results],
            flagged=report.count(Tier.FLAGGED),
            possible=report.count(Tier.POSSIBLE),
            clear=report.count(Tier.CLEAR),
            preview_image_id=report.preview_image_id,
            summary=report.summary(),
        )
