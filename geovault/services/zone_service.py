"""Zone management service."""

from dataclasses import replace
from typing import List, Optional, Tuple

from common.logging_config import get_logger
from geovault.exceptions import InvalidCoordinate, InvalidZoneError, ZoneNotFoundError
from geovault.geo import validate_coordinate
from geovault.repositories.zone_repository import ZoneRepository
from geovault.types import Zone
from geovault.utils import generate_uuid, utcnow

logger = get_logger(__name__)


class ZoneService:
    def __init__(self):
        self.zone_repo = ZoneRepository()

    def create_zone(
        self,
        name: str,
        latitude: float,
        longitude: float,
        radius_meters: float,
        created_by: str,
        description: Optional[str] = None,
    ) -> Zone:
        center = self._validated_center(latitude, longitude)
        now = utcnow()
        zone = Zone(
            zone_id=generate_uuid(),
            name=name,
            description=description,
            center=center,
            radius_meters=float(radius_meters),
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        logger.info(f"Creating zone '{name}' radius={radius_meters}m [created_by={created_by}]")
        return self.zone_repo.create_zone(zone)

    def get_zone(self, zone_id: str) -> Zone:
        zone = self.zone_repo.get_by_id(zone_id)
        if zone is None:
            raise ZoneNotFoundError(f"Zone '{zone_id}' not found")
        return zone

    def list_zones(self) -> List[Tuple[Zone, int]]:
        return self.zone_repo.list_with_file_counts()

    def update_zone(
        self,
        zone_id: str,
        name: str,
        latitude: float,
        longitude: float,
        radius_meters: float,
        description: Optional[str] = None,
    ) -> Zone:
        existing = self.get_zone(zone_id)
        updated = replace(
            existing,
            name=name,
            description=description,
            center=self._validated_center(latitude, longitude),
            radius_meters=float(radius_meters),
            updated_at=utcnow(),
        )
        if not self.zone_repo.update_zone(updated):
            raise ZoneNotFoundError(f"Zone '{zone_id}' not found")
        return updated

    def delete_zone(self, zone_id: str) -> None:
        if not self.zone_repo.delete_zone(zone_id):
            raise ZoneNotFoundError(f"Zone '{zone_id}' not found")
        logger.info(f"Zone {zone_id} deleted together with its files")

    @staticmethod
    def _validated_center(latitude, longitude):
        try:
            return validate_coordinate(latitude, longitude)
        except InvalidCoordinate as e:
            raise InvalidZoneError(f"Invalid zone center: {e}") from e
