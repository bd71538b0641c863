from .face_enrollment import FaceEnrollmentService
from .face_scanning import FaceScanningService

__all__ = ["FaceEnrollmentService", "FaceScanningService"]
