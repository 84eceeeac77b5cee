"""File service for business logic."""

from typing import List, Optional

from common.logging_config import get_logger
from geovault.access import AccessDecider
from geovault.config import MAX_UPLOAD_BYTES
from geovault.crypto import CryptoEngine
from geovault.exceptions import EmptyUploadError, RecordNotFound, UploadTooLargeError, ZoneNotFoundError
from geovault.geo import GeoEvaluator, validate_coordinate
from geovault.repositories.file_repository import FileRepository, FileSummary
from geovault.repositories.zone_repository import ZoneRepository
from geovault.store import SQLiteRecordStore
from geovault.types import AccessClaim, AccessResult, EncryptedRecord, Zone
from geovault.utils import generate_uuid, utcnow

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


class FileService:
    def __init__(self, crypto: CryptoEngine, max_upload_bytes: Optional[int] = None):
        self.crypto = crypto
        self.max_upload_bytes = max_upload_bytes if max_upload_bytes is not None else MAX_UPLOAD_BYTES
        self.file_repo = FileRepository()
        self.zone_repo = ZoneRepository()
        self.geo = GeoEvaluator()

    def upload_file(
        self,
        file_name: str,
        file_data: bytes,
        zone_id: str,
        mime_type: Optional[str] = None,
    ) -> EncryptedRecord:
        """
        Encrypt an upload once and persist it under the given zone.

        Raises:
            ZoneNotFoundError: If zone_id does not name an existing zone
            EmptyUploadError: If file_data is empty
            UploadTooLargeError: If file_data exceeds the configured limit
        """
        if self.zone_repo.get_by_id(zone_id) is None:
            logger.warning(f"Upload rejected: unknown zone [zone_id={zone_id}]")
            raise ZoneNotFoundError(f"Zone '{zone_id}' not found")
        if not file_data:
            raise EmptyUploadError("Uploaded file is empty")
        if len(file_data) > self.max_upload_bytes:
            raise UploadTooLargeError(
                f"Uploaded file is {len(file_data)} bytes, limit is {self.max_upload_bytes}"
            )

        record = EncryptedRecord(
            file_id=generate_uuid(),
            zone_id=zone_id,
            ciphertext=self.crypto.encrypt(file_data),
            cipher_format=self.crypto.format,
            mime_type=mime_type or DEFAULT_MIME_TYPE,
            original_name=file_name,
            size=len(file_data),
            created_at=utcnow(),
        )
        return self.file_repo.create_file(record)

    def list_files(self) -> List[FileSummary]:
        return self.file_repo.list_summaries()

    def files_near(self, latitude: float, longitude: float) -> List[FileSummary]:
        """
        Metadata of files whose zone contains the point. Nothing is
        decrypted and nothing is audited.
        """
        point = validate_coordinate(latitude, longitude)
        summaries = self.file_repo.list_summaries()
        nearby = [s for s in summaries if self.geo.contains(self._summary_zone(s), point)]
        logger.info(f"{len(nearby)} of {len(summaries)} files available at ({point.latitude}, {point.longitude})")
        return nearby

    def delete_file(self, file_id: str) -> None:
        if not self.file_repo.delete_file(file_id):
            raise RecordNotFound(f"File '{file_id}' not found")

    async def access_file(
        self,
        requester_id: str,
        file_id: str,
        latitude: float,
        longitude: float,
    ) -> AccessResult:
        decider = AccessDecider(store=SQLiteRecordStore(), crypto=self.crypto, geo=self.geo)
        claim = AccessClaim(
            requester_id=requester_id,
            file_id=file_id,
            claimed_latitude=latitude,
            claimed_longitude=longitude,
        )
        return await decider.evaluate(claim)

    @staticmethod
    def _summary_zone(summary: FileSummary) -> Zone:
        return Zone(
            zone_id=summary.zone_id,
            name=summary.zone_name,
            center=summary.zone_center,
            radius_meters=summary.zone_radius_meters,
        )
