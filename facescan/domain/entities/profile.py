"""Enrolled identity entities."""
import uuid
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from facescan.domain.entities.face import Embedding, as_embedding


def new_profile_id() -> str:
    """Generate an opaque, unique profile identifier."""
    return uuid.uuid4().hex


class IdentityProfile(BaseModel):
    """A person enrolled for scanning, with the face descriptors collected for them.

    ``id`` is unique and never changes; ``name`` is free text and may repeat.
    """
    id: str = Field(default_factory=new_profile_id, description="Profile identifier")
    name: str = Field(..., min_length=1, description="Display name")
    samples: List[Embedding] = Field(default_factory=list, description="Enrolled face descriptors")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator('samples', mode='before')
    @classmethod
    def validate_samples(cls, v: Any) -> List[Embedding]:
        """Convert every sample to a read-only numpy array."""
        if v is None:
            return []
        return [as_embedding(sample) for sample in v]

    @field_serializer('samples')
    def serialize_samples(self, v: List[Embedding]) -> List[list]:
        return [sample.tolist() for sample in v]

    @property
    def sample_count(self) -> int:
        return len(self.samples)
