"""File repository for database operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from common.logging_config import get_logger
from geovault.database import get_db_connection
from geovault.types import Coordinate, EncryptedRecord

logger = get_logger(__name__)


@dataclass
class FileSummary:
    """File metadata joined with its zone, without the ciphertext."""
    file_id: str
    original_name: str
    mime_type: str
    size: int
    created_at: datetime
    zone_id: str
    zone_name: str
    zone_description: Optional[str]
    zone_center: Coordinate
    zone_radius_meters: float


_SUMMARY_QUERY = """
    SELECT f.file_id, f.original_name, f.mime_type, f.size, f.created_at,
           z.zone_id, z.name AS zone_name, z.description AS zone_description,
           z.latitude, z.longitude, z.radius_meters
    FROM files f
    JOIN zones z ON z.zone_id = f.zone_id
"""


def _row_to_summary(row) -> FileSummary:
    return FileSummary(
        file_id=row["file_id"],
        original_name=row["original_name"],
        mime_type=row["mime_type"],
        size=row["size"],
        created_at=datetime.fromisoformat(row["created_at"]),
        zone_id=row["zone_id"],
        zone_name=row["zone_name"],
        zone_description=row["zone_description"],
        zone_center=Coordinate(latitude=row["latitude"], longitude=row["longitude"]),
        zone_radius_meters=row["radius_meters"],
    )


class FileRepository:
    @staticmethod
    def create_file(record: EncryptedRecord) -> EncryptedRecord:
        logger.debug(f"Storing encrypted file {record.original_name} [file_id={record.file_id}]")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO files (file_id, zone_id, original_name, mime_type, size,
                                       cipher_format, ciphertext, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (record.file_id, record.zone_id, record.original_name, record.mime_type,
                     record.size, record.cipher_format, record.ciphertext,
                     record.created_at.isoformat())
                )
                conn.commit()
                logger.info(
                    f"Stored file {record.original_name} ({record.size} bytes) "
                    f"[file_id={record.file_id}] [zone_id={record.zone_id}]"
                )
            except Exception as e:
                logger.error(f"Failed to store file {record.original_name}: {e}", exc_info=True)
                raise
        return record

    @staticmethod
    def get_by_id(file_id: str) -> Optional[EncryptedRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT file_id, zone_id, original_name, mime_type, size,
                       cipher_format, ciphertext, created_at
                FROM files WHERE file_id = ?
                """,
                (file_id,)
            )
            row = cursor.fetchone()

        if row is None:
            return None

        return EncryptedRecord(
            file_id=row["file_id"],
            zone_id=row["zone_id"],
            ciphertext=bytes(row["ciphertext"]),
            cipher_format=row["cipher_format"],
            mime_type=row["mime_type"],
            original_name=row["original_name"],
            size=row["size"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def list_summaries() -> List[FileSummary]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(_SUMMARY_QUERY + " ORDER BY f.created_at DESC")
            rows = cursor.fetchall()

        logger.debug(f"Fetched {len(rows)} file summaries")
        return [_row_to_summary(row) for row in rows]

    @staticmethod
    def delete_file(file_id: str) -> bool:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("DELETE FROM files WHERE file_id = ?", (file_id,))
                deleted = cursor.rowcount > 0
                conn.commit()
            except Exception as e:
                logger.error(f"Failed to delete file [file_id={file_id}]: {e}", exc_info=True)
                raise

        if deleted:
            logger.info(f"File deleted [file_id={file_id}]")
        return deleted
