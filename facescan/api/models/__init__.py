"""API request and response models."""
from .profile import (
    AddSampleRequest,
    CreateProfileRequest,
    ProfileListResponse,
    ProfileResponse,
    SelectionResponse,
    SelectionUpdateRequest,
)
from .scan import ObservationPayload, ScanImagePayload, ScanRequest, ScanResponse

__all__ = [
    "AddSampleRequest",
    "CreateProfileRequest",
    "ObservationPayload",
    "ProfileListResponse",
    "ProfileResponse",
    "ScanImagePayload",
    "ScanRequest",
    "ScanResponse",
    "SelectionResponse",
    "SelectionUpdateRequest",
]
