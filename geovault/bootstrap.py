"""Create the first administrator account.

Usage:
    GEOVAULT_ADMIN_USERNAME=admin GEOVAULT_ADMIN_PASSWORD=... python -m geovault.bootstrap
"""

import argparse
import os
import sys

from common.logging_config import setup_logging
from geovault.config import ADMIN_PASSWORD_ENV, ADMIN_USERNAME_ENV
from geovault.database import init_database
from geovault.services.auth_service import AuthService

DEFAULT_ADMIN_USERNAME = "admin"


def main(argv=None) -> int:
    """Entry point for admin bootstrap."""
    parser = argparse.ArgumentParser(description="Create the first GeoVault administrator")
    parser.add_argument("--username", default=os.getenv(ADMIN_USERNAME_ENV, DEFAULT_ADMIN_USERNAME))
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    logger = setup_logging('geovault', log_level=args.log_level)

    password = os.getenv(ADMIN_PASSWORD_ENV, "")
    if not password:
        logger.error(f"{ADMIN_PASSWORD_ENV} must be set")
        return 1

    init_database()
    api_key = AuthService().ensure_admin(args.username, password)
    if api_key is None:
        return 0

    logger.info(f"Admin user created: {args.username}")
    # printed, not logged, so the key is not masked
    print(api_key)
    return 0


if __name__ == "__main__":
    sys.exit(main())
