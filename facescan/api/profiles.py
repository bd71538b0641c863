"""People, samples, selection and import/export endpoints."""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Response

from facescan.api.models.profile import (
    AddSampleRequest,
    CreateProfileRequest,
    ProfileListResponse,
    ProfileResponse,
    SelectionResponse,
    SelectionUpdateRequest,
)
from facescan.core.exceptions import (
    EmbeddingMismatchError,
    ProfileImportError,
    ProfileNotFoundError,
    ProfileStoreError,
)
from facescan.core.logging import get_logger
from facescan.domain.interfaces.storage.profile_store import ProfileStore
from facescan.infrastructure.dependencies import get_face_enrollment_service, get_profile_store
from facescan.services.face_enrollment import FaceEnrollmentService
from facescan.services.matching.selection import pool_sample_count

logger = get_logger(__name__)
router = APIRouter(
    responses={
        404: {"description": "Profile not found"},
        500: {"description": "Internal server error"}
    }
)


def _not_found(e: ProfileNotFoundError) -> HTTPException:
    logger.warning("Profile lookup failed", error=str(e))
    return HTTPException(status_code=404, detail=str(e))


def _store_failure(e: ProfileStoreError) -> HTTPException:
    logger.error("Profile store operation failed", error=str(e))
    return HTTPException(status_code=500, detail="Failed to save profile data")


@router.get("", response_model=ProfileListResponse, summary="List enrolled people")
async def list_profiles(store: ProfileStore = Depends(get_profile_store)) -> ProfileListResponse:
    snapshot = await store.snapshot()
    return ProfileListResponse(
        profiles=[ProfileResponse.from_profile(p, snapshot.selection) for p in snapshot.profiles],
        total_samples=pool_sample_count(snapshot.profiles),
    )


@router.post("", response_model=ProfileResponse, status_code=201, summary="Enroll a new person")
async def create_profile(
    request: CreateProfileRequest,
    store: ProfileStore = Depends(get_profile_store)
) -> ProfileResponse:
    try:
        profile = await store.create(request.name)
    except ProfileStoreError as e:
        raise _store_failure(e)
    return ProfileResponse.from_profile(profile, await store.selection())


@router.delete("", status_code=204, summary="Delete every person")
async def clear_profiles(store: ProfileStore = Depends(get_profile_store)) -> Response:
    try:
        await store.clear()
    except ProfileStoreError as e:
        raise _store_failure(e)
    return Response(status_code=204)


@router.get("/export", summary="Export people as a versioned JSON document")
async def export_profiles(
    service: FaceEnrollmentService = Depends(get_face_enrollment_service)
) -> Dict[str, Any]:
    return await service.export_people()


@router.post("/import", response_model=ProfileListResponse, summary="Replace people from an export")
async def import_profiles(
    document: Dict[str, Any] = Body(...),
    service: FaceEnrollmentService = Depends(get_face_enrollment_service)
) -> ProfileListResponse:
    try:
        profiles = await service.import_people(document)
    except ProfileImportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProfileStoreError as e:
        raise _store_failure(e)
    selection = await service.profile_store.selection()
    return ProfileListResponse(
        profiles=[ProfileResponse.from_profile(p, selection) for p in profiles],
        total_samples=pool_sample_count(profiles),
    )


@router.get("/selection", response_model=SelectionResponse, summary="Get the scan selection")
async def get_selection(store: ProfileStore = Depends(get_profile_store)) -> SelectionResponse:
    return SelectionResponse(selection=await store.selection())


@router.put("/selection", response_model=SelectionResponse, summary="Select or deselect everyone")
async def set_all_selected(
    request: SelectionUpdateRequest,
    store: ProfileStore = Depends(get_profile_store)
) -> SelectionResponse:
    return SelectionResponse(selection=await store.set_all_selected(request.selected))


@router.get("/{profile_id}", response_model=ProfileResponse, summary="Get one person")
async def get_profile(
    profile_id: str,
    store: ProfileStore = Depends(get_profile_store)
) -> ProfileResponse:
    try:
        profile = await store.get(profile_id)
    except ProfileNotFoundError as e:
        raise _not_found(e)
    return ProfileResponse.from_profile(profile, await store.selection())


@router.delete("/{profile_id}", status_code=204, summary="Delete one person")
async def delete_profile(
    profile_id: str,
    store: ProfileStore = Depends(get_profile_store)
) -> Response:
    try:
        await store.delete(profile_id)
    except ProfileNotFoundError as e:
        raise _not_found(e)
    except ProfileStoreError as e:
        raise _store_failure(e)
    return Response(status_code=204)


@router.put("/{profile_id}/selection", response_model=SelectionResponse, summary="Select or deselect one person")
async def set_selected(
    profile_id: str,
    request: SelectionUpdateRequest,
    store: ProfileStore = Depends(get_profile_store)
) -> SelectionResponse:
    try:
        selection = await store.set_selected(profile_id, request.selected)
    except ProfileNotFoundError as e:
        raise _not_found(e)
    return SelectionResponse(selection=selection)


@router.post("/{profile_id}/samples", response_model=ProfileResponse, summary="Add a face sample")
async def add_sample(
    profile_id: str,
    request: AddSampleRequest,
    service: FaceEnrollmentService = Depends(get_face_enrollment_service)
) -> ProfileResponse:
    try:
        profile = await service.add_sample(profile_id, request.embedding)
    except ProfileNotFoundError as e:
        raise _not_found(e)
    except EmbeddingMismatchError as e:
        logger.error("Rejected sample with wrong dimensionality", profile_id=profile_id, error=str(e))
        raise HTTPException(status_code=422, detail=str(e))
    except ProfileStoreError as e:
        raise _store_failure(e)
    return ProfileResponse.from_profile(profile, await service.profile_store.selection())


@router.delete("/{profile_id}/samples/{index}", response_model=ProfileResponse, summary="Remove one sample")
async def remove_sample(
    profile_id: str,
    index: int,
    store: ProfileStore = Depends(get_profile_store)
) -> ProfileResponse:
    try:
        profile = await store.remove_sample(profile_id, index)
    except ProfileNotFoundError as e:
        raise _not_found(e)
    return ProfileResponse.from_profile(profile, await store.selection())


@router.delete("/{profile_id}/samples", response_model=ProfileResponse, summary="Clear all samples")
async def clear_samples(
    profile_id: str,
    store: ProfileStore = Depends(get_profile_store)
) -> ProfileResponse:
    try:
        profile = await store.clear_samples(profile_id)
    except ProfileNotFoundError as e:
        raise _not_found(e)
    return ProfileResponse.from_profile(profile, await store.selection())
