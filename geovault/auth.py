"""Authentication and security utilities."""

import uuid

import bcrypt
from fastapi import Depends, Header

from common.logging_config import get_logger
from geovault.config import API_KEY_PREFIX
from geovault.exceptions import InvalidAPIKeyError, PermissionDeniedError
from geovault.repositories.user_repository import User, UserRepository

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Bcrypt hash of the password
    """
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against a bcrypt hash.

    Args:
        password: Plain text password to verify
        password_hash: Bcrypt hash to verify against

    Returns:
        True if password matches hash, False otherwise
    """
    password_bytes = password.encode('utf-8')
    hash_bytes = password_hash.encode('utf-8')
    return bcrypt.checkpw(password_bytes, hash_bytes)


def generate_api_key() -> str:
    """
    Generate a new API Key with the configured prefix.

    Returns:
        API Key string in format: {prefix}{uuid4}
    """
    return f"{API_KEY_PREFIX}{uuid.uuid4()}"


async def get_current_user(authorization: str = Header(...)) -> User:
    """
    FastAPI dependency to validate the API Key and load the caller.

    Args:
        authorization: Authorization header value (format: "Bearer <api_key>")

    Returns:
        The authenticated User

    Raises:
        InvalidAPIKeyError: If the header is malformed or the key is unknown
    """
    if not authorization.startswith("Bearer "):
        raise InvalidAPIKeyError("Invalid authorization header format")

    api_key = authorization[len("Bearer "):].strip()
    if not api_key.startswith(API_KEY_PREFIX):
        raise InvalidAPIKeyError("Invalid API key")

    user = UserRepository.get_by_api_key(api_key)
    if user is None:
        raise InvalidAPIKeyError("Invalid API key")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    FastAPI dependency restricting an endpoint to administrators.

    Raises:
        PermissionDeniedError: If the caller is not an admin
    """
    if not user.is_admin:
        logger.warning(f"Admin operation refused [user_id={user.user_id}]")
        raise PermissionDeniedError("Administrator role required")
    return user
