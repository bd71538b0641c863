"""Image scanning endpoints."""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from facescan.api.models.scan import ScanRequest, ScanResponse
from facescan.core.config import settings
from facescan.core.exceptions import ScanPreconditionError
from facescan.core.logging import get_logger
from facescan.infrastructure.dependencies import get_face_scanning_service
from facescan.services.face_scanning import FaceScanningService

logger = get_logger(__name__)
router = APIRouter(
    responses={
        400: {"description": "Nothing to scan against"},
        500: {"description": "Internal server error"}
    }
)


@router.post(
    "",
    response_model=ScanResponse,
    summary="Scan images against the selected people",
    description=(
        "Matches the faces of each image against every selected person and returns "
        "one verdict per image, in request order. Per-image failures are reported "
        "inline and do not stop the batch."
    ),
)
async def scan_images(
    request: ScanRequest,
    service: FaceScanningService = Depends(get_face_scanning_service)
) -> ScanResponse:
    """Scan a batch of images described by their detector output.

    Raises:
        HTTPException: 400 if no selected person has samples, 422 on invalid thresholds
    """
    try:
        config = request.apply_to(service.config)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        report = await service.scan_batch(
            [image.to_scan_image() for image in request.images],
            config=config,
        )
    except ScanPreconditionError as e:
        raise HTTPException(
            status_code=400,
            detail=f"{e}. Check filters and enroll samples first."
        )
    except Exception as e:
        logger.error("Unexpected error during scan", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while processing the request"
        )

    return ScanResponse.from_report(report, top_n=settings.SUMMARY_TOP_N)
