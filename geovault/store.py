"""SQLite-backed storage collaborator for the access decider."""

import asyncio
from typing import Optional

from geovault.repositories.audit_repository import AuditRepository
from geovault.repositories.file_repository import FileRepository
from geovault.repositories.zone_repository import ZoneRepository
from geovault.types import AuditEntry, EncryptedRecord, Zone


class SQLiteRecordStore:
    """
    Adapts the synchronous repositories to the async store interface.

    Each call runs on a worker thread with its own connection, so
    concurrent evaluations never share a connection.
    """

    def __init__(self):
        self.file_repo = FileRepository()
        self.zone_repo = ZoneRepository()
        self.audit_repo = AuditRepository()

    async def get_record(self, file_id: str) -> Optional[EncryptedRecord]:
        return await asyncio.to_thread(self.file_repo.get_by_id, file_id)

    async def get_zone(self, zone_id: str) -> Optional[Zone]:
        return await asyncio.to_thread(self.zone_repo.get_by_id, zone_id)

    async def append_audit(self, entry: AuditEntry) -> None:
        await asyncio.to_thread(self.audit_repo.append, entry)
