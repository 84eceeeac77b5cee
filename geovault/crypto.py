"""AES-256-GCM encryption of file contents at rest."""

import base64
import binascii
import os
from typing import Callable, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from common.constants import CIPHER_FORMAT, KEY_SIZE_BYTES, NONCE_SIZE_BYTES, TAG_SIZE_BYTES
from common.logging_config import get_logger
from geovault.exceptions import DecryptionFailure, KeyProvisioningError

logger = get_logger(__name__)

HEADER_SIZE_BYTES = NONCE_SIZE_BYTES + TAG_SIZE_BYTES


def load_key(raw: Optional[str]) -> bytes:
    """
    Decode a 256-bit key supplied as hex or base64 text.

    Args:
        raw: 64 hex characters, or standard/urlsafe base64 of 32 bytes

    Returns:
        The 32 key bytes

    Raises:
        KeyProvisioningError: If the key is missing, undecodable or the wrong length
    """
    if raw is None or not raw.strip():
        raise KeyProvisioningError("Encryption key is not configured")

    text = raw.strip()

    if len(text) == KEY_SIZE_BYTES * 2:
        try:
            return bytes.fromhex(text)
        except ValueError:
            pass

    # urlsafe alphabet is mapped onto the standard one so both are validated
    try:
        key = base64.b64decode(text.translate(str.maketrans("-_", "+/")), validate=True)
    except (binascii.Error, ValueError):
        raise KeyProvisioningError("Encryption key is neither valid hex nor base64")

    if len(key) != KEY_SIZE_BYTES:
        raise KeyProvisioningError(
            f"Encryption key must be {KEY_SIZE_BYTES} bytes, got {len(key)}"
        )
    return key


class CryptoEngine:
    """
    Authenticated encryption of opaque byte payloads under one injected key.

    Payload layout: [12-byte nonce][16-byte tag][ciphertext], where the
    ciphertext has the same length as the plaintext. The engine holds no
    mutable state and may be shared between concurrent requests.
    """

    format = CIPHER_FORMAT

    def __init__(self, key: bytes, nonce_source: Optional[Callable[[int], bytes]] = None):
        """
        Args:
            key: 32-byte AES-256 key
            nonce_source: Callable returning n random bytes; defaults to os.urandom.
                Only tests should override it.
        """
        if not isinstance(key, (bytes, bytearray)) or len(key) != KEY_SIZE_BYTES:
            raise KeyProvisioningError(f"Encryption key must be {KEY_SIZE_BYTES} bytes")
        self._aead = AESGCM(bytes(key))
        self._nonce_source = nonce_source or os.urandom

    def __repr__(self) -> str:
        return f"CryptoEngine(format={self.format!r})"

    def encrypt(self, plaintext: bytes) -> bytes:
        nonce = self._nonce_source(NONCE_SIZE_BYTES)
        if len(nonce) != NONCE_SIZE_BYTES:
            raise ValueError(f"Nonce source must return {NONCE_SIZE_BYTES} bytes")

        # AESGCM appends the tag to the ciphertext
        sealed = self._aead.encrypt(nonce, bytes(plaintext), None)
        ciphertext, tag = sealed[:-TAG_SIZE_BYTES], sealed[-TAG_SIZE_BYTES:]
        return nonce + tag + ciphertext

    def decrypt(self, payload: bytes) -> bytes:
        """
        Verify and decrypt a payload produced by encrypt().

        Raises:
            DecryptionFailure: If the payload is truncated or the tag does not verify
        """
        if not isinstance(payload, (bytes, bytearray, memoryview)):
            raise DecryptionFailure("Encrypted payload must be bytes")

        payload = bytes(payload)
        if len(payload) < HEADER_SIZE_BYTES:
            raise DecryptionFailure(
                f"Encrypted payload is {len(payload)} bytes, shorter than the {HEADER_SIZE_BYTES}-byte header"
            )

        nonce = payload[:NONCE_SIZE_BYTES]
        tag = payload[NONCE_SIZE_BYTES:HEADER_SIZE_BYTES]
        ciphertext = payload[HEADER_SIZE_BYTES:]

        try:
            return self._aead.decrypt(nonce, ciphertext + tag, None)
        except InvalidTag:
            raise DecryptionFailure("Authentication tag verification failed") from None
