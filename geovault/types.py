"""Domain types shared by the access-control core."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from geovault.exceptions import InvalidZoneError


@dataclass(frozen=True)
class Coordinate:
    """A WGS-84 latitude/longitude pair in decimal degrees."""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Zone:
    """
    Circular geofence used as the access policy of one or more files.
    """
    zone_id: str
    name: str
    center: Coordinate
    radius_meters: float
    description: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.radius_meters > 0:
            raise InvalidZoneError(f"Zone radius must be positive, got {self.radius_meters}")


@dataclass(frozen=True)
class EncryptedRecord:
    """
    Persisted form of an uploaded file. The ciphertext is never handed out.
    """
    file_id: str
    zone_id: str
    ciphertext: bytes
    cipher_format: str
    mime_type: str
    original_name: str
    size: int
    created_at: datetime

    def __repr__(self) -> str:
        return (
            f"EncryptedRecord(file_id={self.file_id!r}, zone_id={self.zone_id!r}, "
            f"cipher_format={self.cipher_format!r}, size={self.size})"
        )


@dataclass(frozen=True)
class AccessClaim:
    """One request to open a file from a claimed location."""
    requester_id: str
    file_id: str
    claimed_latitude: float
    claimed_longitude: float


@dataclass(frozen=True)
class AuditEntry:
    """
    Append-only record of one access evaluation.
    """
    entry_id: str
    requester_id: str
    file_id: str
    claimed_latitude: float
    claimed_longitude: float
    granted: bool
    timestamp: datetime


@dataclass(frozen=True)
class Granted:
    plaintext: bytes
    record: EncryptedRecord

    def __repr__(self) -> str:
        return f"Granted(file_id={self.record.file_id!r}, bytes={len(self.plaintext)})"


@dataclass(frozen=True)
class Denied:
    distance_meters: float


AccessResult = Union[Granted, Denied]
