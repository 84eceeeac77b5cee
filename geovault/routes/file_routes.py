"""File operation API routes."""

import asyncio

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse, Response

from common.logging_config import get_logger
from geovault.auth import get_current_user, require_admin
from geovault.repositories.user_repository import User
from geovault.schemas.common import ErrorResponse, LocationRequest
from geovault.schemas.files import (
    AddFileResponse,
    FileMetadataResponse,
    ListFilesResponse,
    DeleteFileResponse,
    AccessDeniedResponse
)
from geovault.service_locator import get_crypto_engine
from geovault.services.file_service import FileService
from geovault.types import Denied
from geovault.utils import content_disposition

logger = get_logger(__name__)

router = APIRouter(prefix="/files", tags=["Files"])


def get_file_service() -> FileService:
    return FileService(get_crypto_engine())


@router.post(
    "",
    response_model=AddFileResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE: {"model": ErrorResponse},
    },
)
async def upload_file(
    file: UploadFile = File(...),
    zone_id: str = Form(...),
    admin: User = Depends(require_admin),
    file_service: FileService = Depends(get_file_service),
):
    """
    Upload a file and bind it to a zone. The content is encrypted before it is stored.

    Parameters:
        - file: File to upload (multipart/form-data)
        - zone_id: Zone whose geofence guards the file
        - Authorization header: Bearer <api_key> of an administrator

    Raises:
        - 400: Empty file
        - 403: Caller is not an administrator
        - 404: Zone not found
        - 413: File too large
    """
    content = await file.read()
    # encryption and the sqlite write run off the event loop
    record = await asyncio.to_thread(
        file_service.upload_file,
        file_name=file.filename or "upload",
        file_data=content,
        zone_id=zone_id,
        mime_type=file.content_type,
    )
    return AddFileResponse.from_record(record)


@router.get("", response_model=ListFilesResponse)
async def list_files(
    current_user: User = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service),
):
    """
    List metadata of every stored file with its zone, newest first.
    """
    files = file_service.list_files()
    return ListFilesResponse(files=[FileMetadataResponse.from_summary(f) for f in files])


@router.post(
    "/nearby",
    response_model=ListFilesResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def list_nearby_files(
    location: LocationRequest,
    current_user: User = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service),
):
    """
    List files whose zone contains the given location. Listing does not
    open anything and is not audited.

    Raises:
        - 400: Missing or out-of-range coordinates
    """
    files = file_service.files_near(location.latitude, location.longitude)
    return ListFilesResponse(files=[FileMetadataResponse.from_summary(f) for f in files])


@router.delete("/{file_id}", response_model=DeleteFileResponse)
async def delete_file(
    file_id: str,
    admin: User = Depends(require_admin),
    file_service: FileService = Depends(get_file_service),
):
    file_service.delete_file(file_id)
    return DeleteFileResponse(file_id=file_id, message="File deleted successfully")


@router.post(
    "/{file_id}/access",
    responses={
        status.HTTP_200_OK: {"content": {"application/octet-stream": {}}},
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_403_FORBIDDEN: {"model": AccessDeniedResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
async def access_file(
    file_id: str,
    location: LocationRequest,
    current_user: User = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service),
):
    """
    Open a file from a claimed location.

    Every attempt that reaches the geofence check is audited, granted or not.

    Returns:
        - The decrypted file with its original Content-Type and file name

    Raises:
        - 400: Missing or out-of-range coordinates
        - 403: Location outside the file's zone
        - 404: File not found
        - 500: Stored data failed integrity verification
        - 503: Audit entry could not be written
    """
    result = await file_service.access_file(
        requester_id=current_user.user_id,
        file_id=file_id,
        latitude=location.latitude,
        longitude=location.longitude,
    )

    if isinstance(result, Denied):
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content=AccessDeniedResponse(
                detail="Access denied. You must be within the zone to access this file.",
                code="ACCESS_DENIED",
                granted=False,
            ).model_dump(),
        )

    return Response(
        content=result.plaintext,
        media_type=result.record.mime_type,
        headers={"Content-Disposition": content_disposition(result.record.original_name)},
    )
