"""Zone management API routes (administrators only)."""

from fastapi import APIRouter, Depends, status

from geovault.auth import require_admin
from geovault.repositories.user_repository import User
from geovault.schemas.zones import (
    ZoneRequest,
    ZoneResponse,
    ListZonesResponse,
    DeleteZoneResponse
)
from geovault.services.zone_service import ZoneService

router = APIRouter(prefix="/zones", tags=["Zones"])


@router.get("", response_model=ListZonesResponse)
async def list_zones(admin: User = Depends(require_admin)):
    """
    List all zones, newest first, with the number of files each guards.
    """
    zones = ZoneService().list_zones()
    return ListZonesResponse(
        zones=[ZoneResponse.from_zone(zone, file_count=count) for zone, count in zones]
    )


@router.post("", response_model=ZoneResponse, status_code=status.HTTP_201_CREATED)
async def create_zone(request: ZoneRequest, admin: User = Depends(require_admin)):
    """
    Create a circular zone.

    Raises:
        - 400: Center out of range or radius not positive
        - 403: Caller is not an administrator
    """
    zone = ZoneService().create_zone(
        name=request.name,
        latitude=request.latitude,
        longitude=request.longitude,
        radius_meters=request.radius_meters,
        description=request.description,
        created_by=admin.user_id,
    )
    return ZoneResponse.from_zone(zone, file_count=0)


@router.get("/{zone_id}", response_model=ZoneResponse)
async def get_zone(zone_id: str, admin: User = Depends(require_admin)):
    zone = ZoneService().get_zone(zone_id)
    return ZoneResponse.from_zone(zone)


@router.put("/{zone_id}", response_model=ZoneResponse)
async def update_zone(zone_id: str, request: ZoneRequest, admin: User = Depends(require_admin)):
    """
    Replace a zone's name, center, radius and description.

    Raises:
        - 400: Center out of range or radius not positive
        - 404: Zone not found
    """
    zone = ZoneService().update_zone(
        zone_id=zone_id,
        name=request.name,
        latitude=request.latitude,
        longitude=request.longitude,
        radius_meters=request.radius_meters,
        description=request.description,
    )
    return ZoneResponse.from_zone(zone)


@router.delete("/{zone_id}", response_model=DeleteZoneResponse)
async def delete_zone(zone_id: str, admin: User = Depends(require_admin)):
    """
    Delete a zone and every file guarded by it. Audit entries are kept.

    Raises:
        - 404: Zone not found
    """
    ZoneService().delete_zone(zone_id)
    return DeleteZoneResponse(zone_id=zone_id, message="Zone deleted successfully")
