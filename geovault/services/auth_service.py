"""Authentication service for business logic."""

import sqlite3
from typing import Optional

from common.constants import ROLE_ADMIN, ROLE_USER
from common.logging_config import get_logger
from geovault.auth import hash_password, verify_password, generate_api_key
from geovault.exceptions import UserAlreadyExistsError, InvalidCredentialsError
from geovault.repositories.user_repository import User, UserRepository
from geovault.utils import generate_uuid, utcnow

logger = get_logger(__name__)


class AuthService:
    def __init__(self):
        self.user_repo = UserRepository()

    def register_user(self, username: str, password: str, role: str = ROLE_USER) -> tuple[str, str]:
        logger.info(f"Attempting to register user: {username}")
        existing_user = self.user_repo.get_by_username(username)
        if existing_user is not None:
            logger.warning(f"Registration failed: username '{username}' already exists")
            raise UserAlreadyExistsError(f"Username '{username}' already exists")

        user_id = generate_uuid()
        api_key = generate_api_key()

        try:
            self.user_repo.create_user(
                user_id=user_id,
                username=username,
                password_hash=hash_password(password),
                api_key=api_key,
                created_at=utcnow(),
                role=role,
            )
        except sqlite3.IntegrityError:
            logger.warning(f"Registration failed due to integrity error: username '{username}'")
            raise UserAlreadyExistsError(f"Username '{username}' already exists")

        logger.info(f"Successfully registered user: {username} [user_id={user_id}] [role={role}]")
        return api_key, user_id

    def login_user(self, username: str, password: str) -> str:
        logger.info(f"Login attempt for user: {username}")
        user = self.user_repo.get_by_username(username)
        if user is None:
            logger.warning(f"Login failed: username '{username}' not found")
            raise InvalidCredentialsError("Invalid username or password")

        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed: invalid password for username '{username}'")
            raise InvalidCredentialsError("Invalid username or password")

        new_api_key = generate_api_key()
        self.user_repo.update_api_key(user.user_id, new_api_key, utcnow())
        logger.info(f"Successfully logged in user: {username} [user_id={user.user_id}]")

        return new_api_key

    def ensure_admin(self, username: str, password: str) -> Optional[str]:
        """
        Create the first administrator unless one already exists.

        Returns:
            API key of the new admin, or None when an admin was already present
        """
        existing = self.user_repo.find_admin()
        if existing is not None:
            logger.info(f"Admin user already exists: {existing.username}")
            return None

        api_key, _ = self.register_user(username, password, role=ROLE_ADMIN)
        return api_key

    def validate_api_key(self, api_key: str) -> Optional[User]:
        logger.debug("Validating API key")
        user = self.user_repo.get_by_api_key(api_key)
        if user is None:
            logger.warning("API key validation failed: invalid key")
        return user
