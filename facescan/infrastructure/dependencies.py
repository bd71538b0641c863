"""FastAPI dependency providers."""
from typing import AsyncGenerator

from facescan.core.container import ServiceContainer, container
from facescan.core.exceptions import ServiceNotInitializedError
from facescan.domain.interfaces.storage.profile_store import ProfileStore
from facescan.services.face_enrollment import FaceEnrollmentService
from facescan.services.face_scanning import FaceScanningService


async def get_container() -> ServiceContainer:
    """Dependency provider for the global ServiceContainer instance."""
    if not container.initialized:
        try:
            await container.initialize()
        except Exception as e:
            raise ServiceNotInitializedError(f"Service container could not be initialized: {e}")
    return container


async def get_profile_store() -> AsyncGenerator[ProfileStore, None]:
    """Provide the initialized profile store.

    Raises:
        ServiceNotInitializedError: If the store is not initialized
    """
    cont = await get_container()
    if cont.profile_store is None:
        raise ServiceNotInitializedError("Profile store not initialized")
    yield cont.profile_store


async def get_face_scanning_service() -> AsyncGenerator[FaceScanningService, None]:
    """Provide the initialized face scanning service.

    Raises:
        ServiceNotInitializedError: If the service is not initialized
    """
    cont = await get_container()
    if cont.face_scanning_service is None:
        raise ServiceNotInitializedError("Face scanning service not initialized")
    yield cont.face_scanning_service


async def get_face_enrollment_service() -> AsyncGenerator[FaceEnrollmentService, None]:
    """Provide the initialized face enrollment service.

    Raises:
        ServiceNotInitializedError: If the service is not initialized
    """
    cont = await get_container()
    if cont.face_enrollment_service is None:
        raise ServiceNotInitializedError("Face enrollment service not initialized")
    yield cont.face_enrollment_service
