"""Service interfaces package."""
from .detection import FaceDetector
from .storage import ProfileStore

__all__ = ["FaceDetector", "ProfileStore"]
