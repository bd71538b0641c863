"""API models for people, samples and the scan selection."""
from typing import Dict, List

from pydantic import BaseModel, Field

from facescan.domain.entities.profile import IdentityProfile


class CreateProfileRequest(BaseModel):
    """Request model for enrolling a new person."""
    name: str = Field(..., min_length=1, max_length=200, pattern=r".*\S.*",
                      description="Display name, need not be unique")


class AddSampleRequest(BaseModel):
    """Request model for adding a face descriptor to a person."""
    embedding: List[float] = Field(..., min_length=1, description="Face descriptor vector")


class ProfileResponse(BaseModel):
    """API model for a person, without descriptor values."""
    id: str = Field(..., description="Profile identifier")
    name: str = Field(..., description="Display name")
    sample_count: int = Field(..., ge=0, description="Number of enrolled samples")
    selected: bool = Field(True, description="Whether the person takes part in scans")

    @classmethod
    def from_profile(cls, profile: IdentityProfile, selection: Dict[str, bool]) -> "ProfileResponse":
        """Create an API record from a domain profile and the selection set."""
        return cls(
            id=profile.id,
            name=profile.name,
            sample_count=profile.sample_count,
            selected=selection.get(profile.id) is not False,
        )


class ProfileListResponse(BaseModel):
    """Response model for the people list."""
    profiles: List[ProfileResponse] = Field(..., description="People in enrollment order")
    total_samples: int = Field(..., ge=0, description="Samples across all people")


class SelectionUpdateRequest(BaseModel):
    """Request model for including or excluding people from scans."""
    selected: bool = Field(..., description="True to include in scans")


class SelectionResponse(BaseModel):
    """Response model for the selection set."""
    selection: Dict[str, bool] = Field(..., description="Profile id to selected flag")
