"""Value objects package."""
from .recognition import EnrollmentCandidate, FaceResult, ImageVerdict, MatchResult, Tier
from .scanning import ImageScanResult, ImageScanStatus, ProfileSnapshot, ScanImage, ScanReport

__all__ = [
    "EnrollmentCandidate",
    "FaceResult",
    "ImageScanResult",
    "ImageScanStatus",
    "ImageVerdict",
    "MatchResult",
    "ProfileSnapshot",
    "ScanImage",
    "ScanReport",
    "Tier",
]
