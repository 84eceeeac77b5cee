"""Pydantic schemas for operational diagnostics."""

from pydantic import BaseModel, Field


class EncryptionCheckRequest(BaseModel):
    """Sample text to push through the crypto engine."""
    text: str = Field(min_length=1)


class EncryptionCheckResponse(BaseModel):
    """Outcome of an encrypt/decrypt round trip."""
    success: bool
    cipher_format: str
    plaintext_length: int
    payload_length: int
    overhead_bytes: int
