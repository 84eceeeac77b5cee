"""Pydantic schemas for API requests and responses."""

from geovault.schemas.auth import (
    RegisterRequest,
    RegisterResponse,
    LoginRequest,
    LoginResponse
)
from geovault.schemas.zones import (
    ZoneRequest,
    ZoneResponse,
    ListZonesResponse,
    DeleteZoneResponse
)
from geovault.schemas.files import (
    AddFileResponse,
    FileMetadataResponse,
    ListFilesResponse,
    DeleteFileResponse,
    AccessDeniedResponse
)
from geovault.schemas.audit import AuditEntryResponse, ListAuditResponse
from geovault.schemas.diagnostics import EncryptionCheckRequest, EncryptionCheckResponse
from geovault.schemas.common import ErrorResponse, LocationRequest

__all__ = [
    "RegisterRequest",
    "RegisterResponse",
    "LoginRequest",
    "LoginResponse",
    "ZoneRequest",
    "ZoneResponse",
    "ListZonesResponse",
    "DeleteZoneResponse",
    "AddFileResponse",
    "FileMetadataResponse",
    "ListFilesResponse",
    "DeleteFileResponse",
    "AccessDeniedResponse",
    "AuditEntryResponse",
    "ListAuditResponse",
    "EncryptionCheckRequest",
    "EncryptionCheckResponse",
    "ErrorResponse",
    "LocationRequest"
]
