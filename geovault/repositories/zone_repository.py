"""Zone repository for database operations."""

from datetime import datetime
from typing import List, Optional, Tuple

from common.logging_config import get_logger
from geovault.database import get_db_connection
from geovault.types import Coordinate, Zone

logger = get_logger(__name__)

_ZONE_COLUMNS = (
    "zone_id, name, description, latitude, longitude, radius_meters, "
    "created_by, created_at, updated_at"
)
_ZONE_COLUMNS_QUALIFIED = ", ".join("z." + c.strip() for c in _ZONE_COLUMNS.split(","))


def _row_to_zone(row) -> Zone:
    return Zone(
        zone_id=row["zone_id"],
        name=row["name"],
        description=row["description"],
        center=Coordinate(latitude=row["latitude"], longitude=row["longitude"]),
        radius_meters=row["radius_meters"],
        created_by=row["created_by"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class ZoneRepository:
    @staticmethod
    def create_zone(zone: Zone) -> Zone:
        logger.debug(f"Creating zone: {zone.name} [zone_id={zone.zone_id}]")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"""
                    INSERT INTO zones ({_ZONE_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (zone.zone_id, zone.name, zone.description,
                     zone.center.latitude, zone.center.longitude, zone.radius_meters,
                     zone.created_by, zone.created_at.isoformat(), zone.updated_at.isoformat())
                )
                conn.commit()
                logger.info(f"Zone created: {zone.name} [zone_id={zone.zone_id}]")
            except Exception as e:
                logger.error(f"Failed to create zone {zone.name}: {e}", exc_info=True)
                raise
        return zone

    @staticmethod
    def get_by_id(zone_id: str) -> Optional[Zone]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_ZONE_COLUMNS} FROM zones WHERE zone_id = ?",
                (zone_id,)
            )
            row = cursor.fetchone()

        if row is None:
            logger.debug(f"Zone not found [zone_id={zone_id}]")
            return None
        return _row_to_zone(row)

    @staticmethod
    def list_with_file_counts() -> List[Tuple[Zone, int]]:
        """
        All zones, newest first, each paired with the number of files it guards.
        """
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_ZONE_COLUMNS_QUALIFIED},
                       COUNT(f.file_id) AS file_count
                FROM zones z
                LEFT JOIN files f ON f.zone_id = z.zone_id
                GROUP BY z.zone_id
                ORDER BY z.created_at DESC
                """
            )
            rows = cursor.fetchall()

        return [(_row_to_zone(row), row["file_count"]) for row in rows]

    @staticmethod
    def update_zone(zone: Zone) -> bool:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    UPDATE zones
                    SET name = ?, description = ?, latitude = ?, longitude = ?,
                        radius_meters = ?, updated_at = ?
                    WHERE zone_id = ?
                    """,
                    (zone.name, zone.description, zone.center.latitude, zone.center.longitude,
                     zone.radius_meters, zone.updated_at.isoformat(), zone.zone_id)
                )
                updated = cursor.rowcount > 0
                conn.commit()
            except Exception as e:
                logger.error(f"Failed to update zone [zone_id={zone.zone_id}]: {e}", exc_info=True)
                raise

        if updated:
            logger.info(f"Zone updated [zone_id={zone.zone_id}]")
        return updated

    @staticmethod
    def delete_zone(zone_id: str) -> bool:
        """
        Delete a zone; files guarded by it are removed by the cascade.
        """
        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("DELETE FROM zones WHERE zone_id = ?", (zone_id,))
                deleted = cursor.rowcount > 0
                conn.commit()
            except Exception as e:
                logger.error(f"Failed to delete zone [zone_id={zone_id}]: {e}", exc_info=True)
                raise

        if deleted:
            logger.info(f"Zone deleted [zone_id={zone_id}]")
        return deleted
