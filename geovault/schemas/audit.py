"""Pydantic schemas for audit reporting endpoints."""

from typing import List

from pydantic import BaseModel

from geovault.types import AuditEntry


class AuditEntryResponse(BaseModel):
    """Response model for one audit entry."""
    entry_id: str
    requester_id: str
    file_id: str
    claimed_latitude: float
    claimed_longitude: float
    granted: bool
    timestamp: str

    @classmethod
    def from_entry(cls, entry: AuditEntry) -> "AuditEntryResponse":
        return cls(
            entry_id=entry.entry_id,
            requester_id=entry.requester_id,
            file_id=entry.file_id,
            claimed_latitude=entry.claimed_latitude,
            claimed_longitude=entry.claimed_longitude,
            granted=entry.granted,
            timestamp=entry.timestamp.isoformat(),
        )


class ListAuditResponse(BaseModel):
    """Response model for audit listing."""
    entries: List[AuditEntryResponse]
