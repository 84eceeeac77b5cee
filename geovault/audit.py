"""Append-only recording of access decisions."""

import asyncio

from common.logging_config import get_logger
from geovault.exceptions import AuditPersistenceFailure
from geovault.types import AccessClaim, AuditEntry
from geovault.utils import generate_uuid, utcnow

logger = get_logger(__name__)


def build_audit_entry(claim: AccessClaim, granted: bool) -> AuditEntry:
    """Create the audit entry describing the outcome of one claim."""
    return AuditEntry(
        entry_id=generate_uuid(),
        requester_id=claim.requester_id,
        file_id=claim.file_id,
        claimed_latitude=float(claim.claimed_latitude),
        claimed_longitude=float(claim.claimed_longitude),
        granted=granted,
        timestamp=utcnow(),
    )


class AuditRecorder:
    """
    Persists audit entries through the store and refuses to fail silently.
    """

    def __init__(self, store):
        """
        Args:
            store: Object exposing ``async append_audit(entry)``
        """
        self.store = store

    async def record(self, entry: AuditEntry) -> None:
        """
        Append one entry, waiting for the store to confirm the write.

        The write runs in a shielded task: if the caller is cancelled while
        waiting, the append still completes and the cancellation propagates
        afterwards, so a started entry is never lost.

        Raises:
            AuditPersistenceFailure: If the store reports any error
        """
        write = asyncio.ensure_future(self.store.append_audit(entry))
        try:
            await asyncio.shield(write)
        except asyncio.CancelledError:
            if not write.done():
                logger.warning(
                    f"Evaluation cancelled during audit write, finishing entry {entry.entry_id} [file_id={entry.file_id}]"
                )
                try:
                    await write
                except Exception:
                    logger.error(
                        f"Audit write failed after cancellation [entry_id={entry.entry_id}]",
                        exc_info=True
                    )
            raise
        except Exception as e:
            logger.error(
                f"Failed to persist audit entry {entry.entry_id} [file_id={entry.file_id}] "
                f"[requester_id={entry.requester_id}]: {e}",
                exc_info=True
            )
            raise AuditPersistenceFailure(f"Audit entry could not be persisted: {e}") from e

        logger.info(
            f"Audit entry recorded: granted={entry.granted} [file_id={entry.file_id}] "
            f"[requester_id={entry.requester_id}]"
        )
