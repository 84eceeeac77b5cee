"""Service layer for business logic."""

from geovault.services.auth_service import AuthService
from geovault.services.zone_service import ZoneService
from geovault.services.file_service import FileService

__all__ = [
    "AuthService",
    "ZoneService",
    "FileService",
]
