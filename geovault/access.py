"""Access decisions: geofence check, audit, then decrypt on grant."""

from typing import Optional, Protocol

from common.logging_config import get_logger
from geovault.audit import AuditRecorder, build_audit_entry
from geovault.crypto import CryptoEngine
from geovault.exceptions import DecryptionFailure, RecordNotFound
from geovault.geo import GeoEvaluator, validate_coordinate
from geovault.types import AccessClaim, AccessResult, AuditEntry, Denied, EncryptedRecord, Granted, Zone

logger = get_logger(__name__)


class RecordStore(Protocol):
    """Storage collaborator consumed by the access decider."""

    async def get_record(self, file_id: str) -> Optional[EncryptedRecord]:
        ...

    async def get_zone(self, zone_id: str) -> Optional[Zone]:
        ...

    async def append_audit(self, entry: AuditEntry) -> None:
        ...


class AccessDecider:
    """
    Evaluates one access claim at a time.

    Steps run in a fixed order for each claim: record lookup, zone
    resolution, coordinate validation, geofence check, audit write, and
    decryption only when the claim is inside the zone. Lookup and
    validation failures raise before anything is audited; every claim that
    reaches the geofence check produces exactly one audit entry before the
    result is known to the caller.
    """

    def __init__(
        self,
        store: RecordStore,
        crypto: CryptoEngine,
        geo: Optional[GeoEvaluator] = None,
        recorder: Optional[AuditRecorder] = None,
    ):
        self.store = store
        self.crypto = crypto
        self.geo = geo or GeoEvaluator()
        self.recorder = recorder or AuditRecorder(store)

    async def evaluate(self, claim: AccessClaim) -> AccessResult:
        """
        Decide whether claim may open its file.

        Returns:
            Granted with the plaintext and record metadata, or Denied

        Raises:
            RecordNotFound: File (or its zone) does not exist; not audited
            InvalidCoordinate: Claimed location is malformed; not audited
            AuditPersistenceFailure: Audit entry could not be written; decision void
            DecryptionFailure: Inside the zone but the stored payload failed verification
        """
        record = await self.store.get_record(claim.file_id)
        if record is None:
            logger.warning(f"Access claim for unknown file [file_id={claim.file_id}] [requester_id={claim.requester_id}]")
            raise RecordNotFound(f"File '{claim.file_id}' not found")

        zone = await self.store.get_zone(record.zone_id)
        if zone is None:
            logger.error(f"File references missing zone {record.zone_id} [file_id={record.file_id}]")
            raise RecordNotFound(f"File '{claim.file_id}' not found")

        point = validate_coordinate(claim.claimed_latitude, claim.claimed_longitude)

        distance = self.geo.distance(zone, point)
        inside = self.geo.contains(zone, point)

        await self.recorder.record(build_audit_entry(claim, granted=inside))

        if not inside:
            logger.info(
                f"Access denied: {distance:.1f}m from zone {zone.zone_id} center, radius {zone.radius_meters}m "
                f"[file_id={record.file_id}] [requester_id={claim.requester_id}]"
            )
            return Denied(distance_meters=distance)

        try:
            plaintext = self.crypto.decrypt(record.ciphertext)
        except DecryptionFailure as e:
            logger.error(
                f"Integrity failure decrypting granted file: {e} "
                f"[file_id={record.file_id}] [requester_id={claim.requester_id}]"
            )
            raise

        logger.info(
            f"Access granted: {distance:.1f}m from zone {zone.zone_id} center "
            f"[file_id={record.file_id}] [requester_id={claim.requester_id}]"
        )
        return Granted(plaintext=plaintext, record=record)
