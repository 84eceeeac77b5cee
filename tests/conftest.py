"""Shared pytest fixtures for all tests."""

import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from common.constants import ROLE_ADMIN
from geovault.crypto import CryptoEngine
from geovault.database import init_database
from geovault.types import EncryptedRecord, Zone

from tests.helpers import LONDON_CENTER, TEST_KEY_HEX, InMemoryStore


@pytest.fixture
def test_db(monkeypatch):
    """
    Create a temporary test database for each test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        monkeypatch.setattr("geovault.database.DATABASE_PATH", str(db_path))
        monkeypatch.setattr("geovault.config.DATABASE_PATH", str(db_path))
        init_database()
        yield db_path


@pytest.fixture
def crypto_engine():
    return CryptoEngine(bytes.fromhex(TEST_KEY_HEX))


@pytest.fixture
def london_zone():
    """Zone of radius 50m around (51.5050, -0.0900)."""
    now = datetime.now(timezone.utc)
    return Zone(
        zone_id="zone-london",
        name="London Bridge",
        center=LONDON_CENTER,
        radius_meters=50.0,
        created_by="admin-1",
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def memory_store(london_zone, crypto_engine):
    """
    In-memory store holding the London zone and one encrypted file in it.
    """
    store = InMemoryStore()
    store.add_zone(london_zone)
    store.add_record(EncryptedRecord(
        file_id="file-1",
        zone_id=london_zone.zone_id,
        ciphertext=crypto_engine.encrypt(b"quarterly figures"),
        cipher_format=crypto_engine.format,
        mime_type="text/plain",
        original_name="figures.txt",
        size=len(b"quarterly figures"),
        created_at=datetime.now(timezone.utc),
    ))
    return store


@pytest.fixture
def admin_api_key(test_db):
    from geovault.services.auth_service import AuthService

    api_key, _ = AuthService().register_user("admin", "admin-password", role=ROLE_ADMIN)
    return api_key


@pytest.fixture
def user_credentials(test_db):
    """
    Register a regular user.

    Returns:
        Tuple of (api_key, user_id)
    """
    from geovault.services.auth_service import AuthService

    return AuthService().register_user("alice", "alice-password")
