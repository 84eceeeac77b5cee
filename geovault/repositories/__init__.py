"""Repository layer for data access."""

from geovault.repositories.user_repository import UserRepository
from geovault.repositories.zone_repository import ZoneRepository
from geovault.repositories.file_repository import FileRepository
from geovault.repositories.audit_repository import AuditRepository

__all__ = [
    "UserRepository",
    "ZoneRepository",
    "FileRepository",
    "AuditRepository",
]
