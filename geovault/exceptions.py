"""Custom exception classes for GeoVault."""


class GeoVaultError(Exception):
    """
    Base exception class for all GeoVault errors.
    """
    pass


class InvalidCoordinate(GeoVaultError):
    """
    Raised when a latitude/longitude pair is missing, non-finite or out of range.
    """
    pass


class RecordNotFound(GeoVaultError):
    """
    Raised when an access claim names a file that does not exist.
    """
    pass


class ZoneNotFoundError(GeoVaultError):
    """
    Raised when a requested zone does not exist.
    """
    pass


class InvalidZoneError(GeoVaultError):
    """
    Raised when zone parameters violate the zone invariants (e.g. radius <= 0).
    """
    pass


class DecryptionFailure(GeoVaultError):
    """
    Raised when a stored payload is malformed or fails tag verification.
    """
    pass


class AuditPersistenceFailure(GeoVaultError):
    """
    Raised when an audit entry cannot be persisted; the access decision is void.
    """
    pass


class KeyProvisioningError(GeoVaultError):
    """
    Raised at startup when the encryption key is missing or malformed.
    """
    pass


class UserAlreadyExistsError(GeoVaultError):
    """
    Raised when attempting to register a username that already exists.
    """
    pass


class InvalidCredentialsError(GeoVaultError):
    """
    Raised when login credentials are invalid.
    """
    pass


class InvalidAPIKeyError(GeoVaultError):
    """
    Raised when an API Key is invalid or expired.
    """
    pass


class PermissionDeniedError(GeoVaultError):
    """
    Raised when a non-admin user calls an admin-only operation.
    """
    pass


class EmptyUploadError(GeoVaultError):
    """
    Raised when an uploaded file has no content.
    """
    pass


class UploadTooLargeError(GeoVaultError):
    """
    Raised when an uploaded file exceeds the configured size limit.
    """
    pass
