"""Audit entry repository. Insert and read only."""

from datetime import datetime
from typing import List, Optional

from common.logging_config import get_logger
from geovault.database import get_db_connection
from geovault.types import AuditEntry

logger = get_logger(__name__)


def _row_to_entry(row) -> AuditEntry:
    return AuditEntry(
        entry_id=row["entry_id"],
        requester_id=row["requester_id"],
        file_id=row["file_id"],
        claimed_latitude=row["claimed_latitude"],
        claimed_longitude=row["claimed_longitude"],
        granted=bool(row["granted"]),
        timestamp=datetime.fromisoformat(row["timestamp"]),
    )


class AuditRepository:
    @staticmethod
    def append(entry: AuditEntry) -> None:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO audit_entries (entry_id, requester_id, file_id, claimed_latitude,
                                           claimed_longitude, granted, timestamp)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (entry.entry_id, entry.requester_id, entry.file_id, entry.claimed_latitude,
                 entry.claimed_longitude, int(entry.granted), entry.timestamp.isoformat())
            )
            conn.commit()

    @staticmethod
    def query(
        file_id: Optional[str] = None,
        requester_id: Optional[str] = None,
        granted: Optional[bool] = None,
        limit: int = 100,
    ) -> List[AuditEntry]:
        """
        Read entries newest first, optionally filtered.

        Args:
            file_id: Only entries for this file
            requester_id: Only entries by this requester
            granted: Only granted (True) or denied (False) entries
            limit: Maximum number of entries returned

        Returns:
            List of AuditEntry
        """
        clauses = []
        params: list = []
        if file_id is not None:
            clauses.append("file_id = ?")
            params.append(file_id)
        if requester_id is not None:
            clauses.append("requester_id = ?")
            params.append(requester_id)
        if granted is not None:
            clauses.append("granted = ?")
            params.append(int(granted))

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(limit)

        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT entry_id, requester_id, file_id, claimed_latitude, claimed_longitude,
                       granted, timestamp
                FROM audit_entries
                {where}
                ORDER BY timestamp DESC, rowid DESC
                LIMIT ?
                """,
                params
            )
            rows = cursor.fetchall()

        logger.debug(f"Fetched {len(rows)} audit entries")
        return [_row_to_entry(row) for row in rows]
