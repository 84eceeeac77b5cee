"""Project-wide constants (geodesy, cipher layout, limits)."""

EARTH_RADIUS_METERS: float = 6_371_000.0  # mean spherical radius

KEY_SIZE_BYTES: int = 32  # AES-256
NONCE_SIZE_BYTES: int = 12
TAG_SIZE_BYTES: int = 16
CIPHER_FORMAT: str = "aes-256-gcm/v1"

ROLE_ADMIN: str = "admin"
ROLE_USER: str = "user"

DEFAULT_MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024
DEFAULT_AUDIT_PAGE_SIZE: int = 100
MAX_AUDIT_PAGE_SIZE: int = 1000
