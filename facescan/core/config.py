"""Configuration settings for the face scanning service."""
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    These settings are loaded from environment variables with the following precedence:
    1. Environment variables
    2. .env file
    3. Default values

    Attributes:
        THRESHOLD: Distance cutoff at or below which a face is FLAGGED
        POSSIBLE_BAND: Extra distance above THRESHOLD reported as POSSIBLE (0 disables)
        CONFIDENCE_MARGIN: Distance past the possible cutoff where confidence reaches 0
        PROFILE_STORE_PATH: JSON file holding enrolled people and the scan selection
    """
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
        env_nested_delimiter="__"
    )

    # Core Settings
    PROJECT_NAME: str = "Face Scan Service"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"

    # CORS Settings
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origins(self) -> List[str]:
        """Get list of allowed origins."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Matching Settings (embedding distance)
    THRESHOLD: float = 0.60  # 0.52 is often too strict on real photos
    POSSIBLE_BAND: float = 0.10
    CONFIDENCE_MARGIN: float = 0.25

    # Plausibility Settings
    MIN_DETECTION_SCORE: float = 0.35
    MIN_FACE_PX: float = 20.0
    MIN_ASPECT_RATIO: float = 0.5
    MAX_ASPECT_RATIO: float = 2.0
    MAX_FACE_AREA_FRACTION: float = 0.75
    MAX_FACES_PER_IMAGE: int = 30

    # Detection Surface Settings
    SCAN_MIN_SIDE: int = 900  # crowd/stage shots need a larger surface
    ENROLL_MIN_SIDE: int = 700
    DETECTOR_SCORE_THRESHOLD: float = 0.08
    DETECTOR_FALLBACK_SCORE_THRESHOLD: float = 0.04
    PREVIEW_MAX_WIDTH: int = 1100

    # Scan Worker Settings
    MAX_CONCURRENT_SCANS: int = 4
    SUMMARY_TOP_N: int = 3

    # Profile Store Settings
    PROFILE_STORE_PATH: str = "profiles.json"

    # Optional settings with defaults
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000


class MatchingConfig(BaseModel):
    """Thresholds used by one scan.

    Built from ``Settings`` and overridable per request. ``possible_band`` of 0
    turns the matcher into a binary MATCHED/CLEAR classifier.
    """
    threshold: float = Field(0.60, gt=0, description="Distance cutoff for FLAGGED")
    possible_band: float = Field(0.10, ge=0, description="Extra distance span for POSSIBLE")
    confidence_margin: float = Field(0.25, ge=0, description="Confidence decay margin")
    min_det_score: float = Field(0.35, ge=0, le=1, description="Minimum detector score")
    min_face_px: float = Field(20.0, ge=0, description="Minimum face side in source pixels")
    min_aspect_ratio: float = Field(0.5, gt=0, description="Minimum width/height ratio")
    max_aspect_ratio: float = Field(2.0, gt=0, description="Maximum width/height ratio")
    max_face_area_fraction: float = Field(
        0.75, gt=0, le=1,
        description="Largest allowed face side as a fraction of the matching image side"
    )
    max_faces_per_image: int = Field(30, gt=0, description="Faces matched per image")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_aspect_range(self) -> "MatchingConfig":
        """Reject an empty aspect ratio window."""
        if self.min_aspect_ratio > self.max_aspect_ratio:
            raise ValueError("min_aspect_ratio must not exceed max_aspect_ratio")
        return self

    @property
    def possible_cutoff(self) -> float:
        """Largest distance still reported as a match."""
        return self.threshold + self.possible_band

    @classmethod
    def from_settings(cls, source: Settings) -> "MatchingConfig":
        """Create the matching configuration from application settings."""
        return cls(
            threshold=source.THRESHOLD,
            possible_band=source.POSSIBLE_BAND,
            confidence_margin=source.CONFIDENCE_MARGIN,
            min_det_score=source.MIN_DETECTION_SCORE,
            min_face_px=source.MIN_FACE_PX,
            min_aspect_ratio=source.MIN_ASPECT_RATIO,
            max_aspect_ratio=source.MAX_ASPECT_RATIO,
            max_face_area_fraction=source.MAX_FACE_AREA_FRACTION,
            max_faces_per_image=source.MAX_FACES_PER_IMAGE,
        )

    def with_overrides(self, **overrides: Any) -> "MatchingConfig":
        """Return a validated copy with the given non-None fields replaced."""
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        return MatchingConfig(**values)


settings = Settings()
