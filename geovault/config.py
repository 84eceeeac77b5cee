"""Configuration settings for the GeoVault server."""

import os

from common.constants import DEFAULT_MAX_UPLOAD_BYTES


DATABASE_PATH = os.environ.get("GEOVAULT_DATABASE_PATH", "./data/geovault.db")

GEOVAULT_HOST = os.environ.get("GEOVAULT_HOST", "0.0.0.0")

GEOVAULT_PORT = int(os.environ.get("GEOVAULT_PORT", "8000"))

ENCRYPTION_KEY_ENV = "GEOVAULT_ENCRYPTION_KEY"

MAX_UPLOAD_BYTES = int(os.environ.get("GEOVAULT_MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES)))

API_KEY_PREFIX = "gv_"

ADMIN_USERNAME_ENV = "GEOVAULT_ADMIN_USERNAME"

ADMIN_PASSWORD_ENV = "GEOVAULT_ADMIN_PASSWORD"


def get_encryption_key_text() -> str:
    """
    Read the raw encryption key from the environment at call time.

    Returns:
        Key text as supplied (hex or base64), or an empty string when unset
    """
    return os.environ.get(ENCRYPTION_KEY_ENV, "").strip()
