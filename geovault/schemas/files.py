"""Pydantic schemas for file operation endpoints."""

from typing import List, Optional

from pydantic import BaseModel

from geovault.repositories.file_repository import FileSummary
from geovault.types import EncryptedRecord


class AddFileResponse(BaseModel):
    """Response model for file upload. Never carries the ciphertext."""
    file_id: str
    zone_id: str
    original_name: str
    mime_type: str
    size: int
    created_at: str

    @classmethod
    def from_record(cls, record: EncryptedRecord) -> "AddFileResponse":
        return cls(
            file_id=record.file_id,
            zone_id=record.zone_id,
            original_name=record.original_name,
            mime_type=record.mime_type,
            size=record.size,
            created_at=record.created_at.isoformat(),
        )


class ZoneSummary(BaseModel):
    """Zone details attached to file listings."""
    zone_id: str
    name: str
    description: Optional[str]
    latitude: float
    longitude: float
    radius_meters: float


class FileMetadataResponse(BaseModel):
    """Response model for file metadata."""
    file_id: str
    original_name: str
    mime_type: str
    size: int
    created_at: str
    zone: ZoneSummary

    @classmethod
    def from_summary(cls, summary: FileSummary) -> "FileMetadataResponse":
        return cls(
            file_id=summary.file_id,
            original_name=summary.original_name,
            mime_type=summary.mime_type,
            size=summary.size,
            created_at=summary.created_at.isoformat(),
            zone=ZoneSummary(
                zone_id=summary.zone_id,
                name=summary.zone_name,
                description=summary.zone_description,
                latitude=summary.zone_center.latitude,
                longitude=summary.zone_center.longitude,
                radius_meters=summary.zone_radius_meters,
            ),
        )


class ListFilesResponse(BaseModel):
    """Response model for file listing."""
    files: List[FileMetadataResponse]


class DeleteFileResponse(BaseModel):
    """Response model for file deletion."""
    file_id: str
    message: str


class AccessDeniedResponse(BaseModel):
    """Response model for a geofence denial."""
    detail: str
    code: str
    granted: bool
