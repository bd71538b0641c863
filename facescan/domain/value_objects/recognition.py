"""Face recognition value objects."""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from facescan.domain.entities.face import BoundingBox, FaceObservation


class Tier(str, Enum):
    """Outcome bucket for a face or an image, most severe first."""
    FLAGGED = "flagged"
    POSSIBLE = "possible"
    CLEAR = "clear"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {Tier.CLEAR: 0, Tier.POSSIBLE: 1, Tier.FLAGGED: 2}


class MatchResult(BaseModel):
    """Best identity for one face.

    ``confidence`` is a display heuristic derived from distance, not a probability.
    """
    identity_id: str = Field(..., description="Matched profile identifier")
    name: str = Field(..., description="Matched profile name")
    distance: float = Field(..., ge=0, description="Euclidean distance to the closest sample")
    confidence: int = Field(..., ge=0, le=100, description="Heuristic confidence (0-100)")
    tier: Tier = Field(..., description="FLAGGED or POSSIBLE")

    model_config = ConfigDict(frozen=True)

    @property
    def label(self) -> str:
        return f"{self.name} ({self.confidence}%)"


class FaceResult(BaseModel):
    """Per-face detail kept for annotated previews."""
    observation: FaceObservation = Field(..., description="Accepted detector observation")
    source_box: BoundingBox = Field(..., description="Box in source image coordinates")
    best_match: Optional[MatchResult] = Field(None, description="Closest identity within the cutoff")
    candidates: List[MatchResult] = Field(
        default_factory=list,
        description="Every identity within the cutoff, closest first"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def tier(self) -> Tier:
        return self.best_match.tier if self.best_match else Tier.CLEAR


class ImageVerdict(BaseModel):
    """Aggregated outcome for one scanned image."""
    tier: Tier = Field(..., description="Most severe tier among the image's faces")
    matched_identities: List[MatchResult] = Field(
        default_factory=list,
        description="One entry per matched identity, closest first"
    )
    face_count: int = Field(..., ge=0, description="Faces evaluated, matched or not")

    model_config = ConfigDict(frozen=True)

    def describe(self, top_n: int = 3) -> str:
        """Short label such as ``"Alice (87%), Bob (61%) +2"``; ``"—"`` when nothing matched.

        Only identities at the image's own tier are listed, so a FLAGGED image
        does not name people who were merely POSSIBLE.
        """
        listed = [match for match in self.matched_identities if match.tier == self.tier]
        if self.tier == Tier.CLEAR or not listed:
            return "—"
        shown = listed[:top_n]
        label = ", ".join(match.label for match in shown)
        remaining = len(listed) - len(shown)
        if remaining > 0:
            label += f" +{remaining}"
        return label


class EnrollmentCandidate(BaseModel):
    """A face found in an enrollment photo, offered to the user as a sample."""
    index: int = Field(..., ge=0, description="Position in detector order")
    observation: FaceObservation = Field(..., description="Detector observation with descriptor")
    source_box: BoundingBox = Field(..., description="Box in source image coordinates")
    crop_box: BoundingBox = Field(..., description="Padded thumbnail region, clipped to the image")

    model_config = ConfigDict(frozen=True)
