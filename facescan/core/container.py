"""Service container for dependency injection."""
from typing import Optional

from facescan.core.config import MatchingConfig, settings
from facescan.domain.interfaces.detection.face_detector import FaceDetector
from facescan.domain.interfaces.storage.profile_store import ProfileStore
from facescan.infrastructure.detection import PrecomputedDetector
from facescan.infrastructure.storage import JsonFileProfileStore
from facescan.services.face_enrollment import FaceEnrollmentService
from facescan.services.face_scanning import FaceScanningService


class ServiceContainer:
    """Container for application services.

    This container manages the lifecycle and dependencies of all services in the application.
    It ensures proper initialization order and provides a single source of truth for service instances.

    Example:
        ```python
        container = ServiceContainer()
        await container.initialize()

        scanner = container.face_scanning_service
        ```
    """

    def __init__(self) -> None:
        """Initialize empty container."""
        # Core services - Use interface type hints
        self.profile_store: Optional[ProfileStore] = None
        self.detector: Optional[FaceDetector] = None

        # Domain services (depend on interfaces)
        self.face_scanning_service: Optional[FaceScanningService] = None
        self.face_enrollment_service: Optional[FaceEnrollmentService] = None

    @property
    def initialized(self) -> bool:
        return self.profile_store is not None

    async def initialize(
        self,
        profile_store: Optional[ProfileStore] = None,
        detector: Optional[FaceDetector] = None,
    ) -> None:
        """Initialize all services in the correct order.

        Args:
            profile_store: Store to use instead of the JSON file from settings
            detector: Detector to use instead of the precomputed-observation adapter
        """
        self.profile_store = profile_store or JsonFileProfileStore(settings.PROFILE_STORE_PATH)
        self.detector = detector or PrecomputedDetector()
        self.face_scanning_service = FaceScanningService(
            detector=self.detector,
            profile_store=self.profile_store,
            config=MatchingConfig.from_settings(settings),
        )
        self.face_enrollment_service = FaceEnrollmentService(
            detector=self.detector,
            profile_store=self.profile_store,
        )

    async def cleanup(self) -> None:
        """Cleanup all services in reverse order of initialization."""
        self.face_enrollment_service = None
        self.face_scanning_service = None
        self.detector = None
        self.profile_store = None


# Global container instance
container = ServiceContainer()
