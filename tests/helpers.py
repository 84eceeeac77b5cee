"""Test doubles and constants shared across test modules."""

import asyncio

from geovault.types import Coordinate, EncryptedRecord, Zone

TEST_KEY_HEX = "000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f"

LONDON_CENTER = Coordinate(latitude=51.5050, longitude=-0.0900)


class StoreUnavailable(Exception):
    """Raised by InMemoryStore when audit writes are switched off."""


class InMemoryStore:
    """
    Record store double holding records, zones and audit entries in memory.
    """

    def __init__(self):
        self.records = {}
        self.zones = {}
        self.audit_entries = []
        self.fail_audit = False
        self.calls = []

    def add_zone(self, zone: Zone) -> Zone:
        self.zones[zone.zone_id] = zone
        return zone

    def add_record(self, record: EncryptedRecord) -> EncryptedRecord:
        self.records[record.file_id] = record
        return record

    async def get_record(self, file_id):
        self.calls.append(("get_record", file_id))
        return self.records.get(file_id)

    async def get_zone(self, zone_id):
        self.calls.append(("get_zone", zone_id))
        return self.zones.get(zone_id)

    async def append_audit(self, entry):
        self.calls.append(("append_audit", entry.entry_id))
        await asyncio.sleep(0)
        if self.fail_audit:
            raise StoreUnavailable("audit store offline")
        self.audit_entries.append(entry)
