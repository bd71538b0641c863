"""Domain entities package."""
from .face import BoundingBox, Embedding, FaceObservation, ImageDimensions, as_embedding
from .profile import IdentityProfile, new_profile_id

__all__ = [
    "BoundingBox",
    "Embedding",
    "FaceObservation",
    "IdentityProfile",
    "ImageDimensions",
    "as_embedding",
    "new_profile_id",
]
