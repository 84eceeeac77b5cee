"""Operational diagnostics routes (administrators only)."""

from fastapi import APIRouter, Depends

from common.logging_config import get_logger
from geovault.auth import require_admin
from geovault.repositories.user_repository import User
from geovault.schemas.diagnostics import EncryptionCheckRequest, EncryptionCheckResponse
from geovault.service_locator import get_crypto_engine

logger = get_logger(__name__)

router = APIRouter(prefix="/diagnostics", tags=["Diagnostics"])


@router.post("/encryption", response_model=EncryptionCheckResponse)
async def check_encryption(request: EncryptionCheckRequest, admin: User = Depends(require_admin)):
    """
    Round-trip a text sample through the configured crypto engine.

    Neither the sample nor the payload is stored or echoed back.
    """
    engine = get_crypto_engine()
    plaintext = request.text.encode("utf-8")
    payload = engine.encrypt(plaintext)
    success = engine.decrypt(payload) == plaintext

    logger.info(f"Encryption self-check success={success} plaintext_length={len(plaintext)} [user_id={admin.user_id}]")

    return EncryptionCheckResponse(
        success=success,
        cipher_format=engine.format,
        plaintext_length=len(plaintext),
        payload_length=len(payload),
        overhead_bytes=len(payload) - len(plaintext),
    )
