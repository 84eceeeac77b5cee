"""Pydantic schemas for zone management endpoints."""

from typing import List, Optional

from pydantic import BaseModel, Field

from geovault.types import Zone


class ZoneRequest(BaseModel):
    """Request model for creating or replacing a zone."""
    name: str = Field(min_length=1)
    latitude: float
    longitude: float
    radius_meters: float
    description: Optional[str] = None


class ZoneResponse(BaseModel):
    """Response model for a zone."""
    zone_id: str
    name: str
    description: Optional[str]
    latitude: float
    longitude: float
    radius_meters: float
    created_by: Optional[str]
    created_at: str
    updated_at: str
    file_count: Optional[int] = None

    @classmethod
    def from_zone(cls, zone: Zone, file_count: Optional[int] = None) -> "ZoneResponse":
        return cls(
            zone_id=zone.zone_id,
            name=zone.name,
            description=zone.description,
            latitude=zone.center.latitude,
            longitude=zone.center.longitude,
            radius_meters=zone.radius_meters,
            created_by=zone.created_by,
            created_at=zone.created_at.isoformat(),
            updated_at=zone.updated_at.isoformat(),
            file_count=file_count,
        )


class ListZonesResponse(BaseModel):
    """Response model for zone listing."""
    zones: List[ZoneResponse]


class DeleteZoneResponse(BaseModel):
    """Response model for zone deletion."""
    zone_id: str
    message: str
