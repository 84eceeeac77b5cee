"""Tests for GeoVault API endpoints."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from geovault.database import get_db_connection
from geovault.exceptions import KeyProvisioningError
from geovault.main import app, startup_event
from geovault.repositories.audit_repository import AuditRepository
from geovault.service_locator import get_crypto_engine, set_crypto_engine
from geovault.services.file_service import FileService

from tests.helpers import TEST_KEY_HEX

CENTER = {'latitude': 51.5050, 'longitude': -0.0900}
ONE_KM_NORTH = {'latitude': 51.5150, 'longitude': -0.0900}


@pytest.fixture
def client(test_db, monkeypatch):
    """Create FastAPI test client with startup run against the test database."""
    monkeypatch.setenv('GEOVAULT_ENCRYPTION_KEY', TEST_KEY_HEX)
    with TestClient(app) as test_client:
        yield test_client


def bearer(api_key):
    return {'Authorization': f'Bearer {api_key}'}


def create_zone(client, admin_api_key, **overrides):
    body = {
        'name': 'London Bridge',
        'latitude': 51.5050,
        'longitude': -0.0900,
        'radius_meters': 50,
        'description': 'south bank',
    }
    body.update(overrides)
    response = client.post('/zones', json=body, headers=bearer(admin_api_key))
    assert response.status_code == 201, response.text
    return response.json()


def upload(client, admin_api_key, zone_id, name='figures.txt', content=b'quarterly figures', mime='text/plain'):
    return client.post(
        '/files',
        files={'file': (name, content, mime)},
        data={'zone_id': zone_id},
        headers=bearer(admin_api_key),
    )


@pytest.fixture
def stored_file(client, admin_api_key):
    zone = create_zone(client, admin_api_key)
    response = upload(client, admin_api_key, zone['zone_id'])
    assert response.status_code == 201, response.text
    return response.json()


def audit_entries(client, admin_api_key, **params):
    response = client.get('/audit', params=params, headers=bearer(admin_api_key))
    assert response.status_code == 200, response.text
    return response.json()['entries']


class TestServiceEndpoints:

    def test_root_endpoint(self, client):
        response = client.get('/')
        assert response.status_code == 200
        assert response.json()['status'] == 'running'

    def test_health(self, client):
        assert client.get('/health').json() == {'status': 'healthy', 'service': 'geovault'}

    def test_ready(self, client):
        response = client.get('/ready')
        assert response.status_code == 200
        assert response.json() == {'ready': True, 'database': 'ok'}

    def test_request_id_header(self, client):
        assert client.get('/health').headers['X-Request-ID']


class TestStartup:

    @pytest.mark.asyncio
    async def test_missing_key_aborts_startup(self, test_db, monkeypatch):
        monkeypatch.delenv('GEOVAULT_ENCRYPTION_KEY', raising=False)
        set_crypto_engine(None)

        with pytest.raises(KeyProvisioningError):
            await startup_event()

        with pytest.raises(RuntimeError):
            get_crypto_engine()

    @pytest.mark.asyncio
    async def test_short_key_aborts_startup(self, test_db, monkeypatch):
        monkeypatch.setenv('GEOVAULT_ENCRYPTION_KEY', 'abcd')
        set_crypto_engine(None)

        with pytest.raises(KeyProvisioningError):
            await startup_event()

    @pytest.mark.asyncio
    async def test_valid_key_installs_engine(self, test_db, monkeypatch):
        monkeypatch.setenv('GEOVAULT_ENCRYPTION_KEY', TEST_KEY_HEX)

        await startup_event()

        assert get_crypto_engine().format == 'aes-256-gcm/v1'
        set_crypto_engine(None)


class TestAuthEndpoints:

    def test_register(self, client):
        response = client.post('/auth/register', json={'username': 'bob', 'password': 'pw'})
        assert response.status_code == 201
        data = response.json()
        assert data['api_key'].startswith('gv_')
        assert data['user_id']

    def test_register_duplicate(self, client):
        client.post('/auth/register', json={'username': 'bob', 'password': 'pw'})
        response = client.post('/auth/register', json={'username': 'bob', 'password': 'other'})
        assert response.status_code == 400
        assert response.json()['code'] == 'USER_ALREADY_EXISTS'

    def test_register_empty_username(self, client):
        response = client.post('/auth/register', json={'username': '', 'password': 'pw'})
        assert response.status_code == 422

    def test_login_rotates_key(self, client):
        first = client.post('/auth/register', json={'username': 'bob', 'password': 'pw'}).json()['api_key']

        response = client.post('/auth/login', json={'username': 'bob', 'password': 'pw'})

        assert response.status_code == 200
        second = response.json()['api_key']
        assert second != first
        assert client.get('/files', headers=bearer(first)).status_code == 401
        assert client.get('/files', headers=bearer(second)).status_code == 200

    def test_login_wrong_password(self, client):
        client.post('/auth/register', json={'username': 'bob', 'password': 'pw'})
        response = client.post('/auth/login', json={'username': 'bob', 'password': 'nope'})
        assert response.status_code == 401
        assert response.json()['code'] == 'INVALID_CREDENTIALS'

    @pytest.mark.parametrize('header', ['gv_abc', 'Bearer dfs_fake_key', 'Bearer gv_unknown'])
    def test_invalid_api_key(self, client, header):
        response = client.get('/files', headers={'Authorization': header})
        assert response.status_code == 401
        assert response.json()['code'] == 'INVALID_API_KEY'

    def test_missing_authorization(self, client):
        assert client.get('/files').status_code == 422


class TestZoneEndpoints:

    def test_create_and_get(self, client, admin_api_key):
        zone = create_zone(client, admin_api_key)

        assert zone['radius_meters'] == 50
        assert zone['file_count'] == 0

        response = client.get(f"/zones/{zone['zone_id']}", headers=bearer(admin_api_key))
        assert response.status_code == 200
        assert response.json()['name'] == 'London Bridge'

    def test_regular_user_forbidden(self, client, user_credentials):
        api_key, _ = user_credentials
        response = client.post('/zones', json={
            'name': 'x', 'latitude': 0, 'longitude': 0, 'radius_meters': 10,
        }, headers=bearer(api_key))
        assert response.status_code == 403
        assert response.json()['code'] == 'PERMISSION_DENIED'
        assert client.get('/zones', headers=bearer(api_key)).status_code == 403

    @pytest.mark.parametrize('overrides', [
        {'radius_meters': 0},
        {'radius_meters': -5},
        {'latitude': 95},
        {'longitude': -200},
    ])
    def test_invalid_zone(self, client, admin_api_key, overrides):
        body = {'name': 'bad', 'latitude': 0, 'longitude': 0, 'radius_meters': 10}
        body.update(overrides)
        response = client.post('/zones', json=body, headers=bearer(admin_api_key))
        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_ZONE'

    def test_list_counts_files(self, client, admin_api_key, stored_file):
        response = client.get('/zones', headers=bearer(admin_api_key))
        [zone] = response.json()['zones']
        assert zone['zone_id'] == stored_file['zone_id']
        assert zone['file_count'] == 1

    def test_update(self, client, admin_api_key):
        zone = create_zone(client, admin_api_key)
        response = client.put(f"/zones/{zone['zone_id']}", json={
            'name': 'Paris', 'latitude': 48.8566, 'longitude': 2.3522, 'radius_meters': 500,
        }, headers=bearer(admin_api_key))

        assert response.status_code == 200
        data = response.json()
        assert data['name'] == 'Paris'
        assert data['radius_meters'] == 500
        assert data['created_at'] == zone['created_at']

    def test_update_invalid_radius(self, client, admin_api_key):
        zone = create_zone(client, admin_api_key)
        response = client.put(f"/zones/{zone['zone_id']}", json={
            'name': 'x', 'latitude': 0, 'longitude': 0, 'radius_meters': 0,
        }, headers=bearer(admin_api_key))
        assert response.status_code == 400

    def test_missing_zone(self, client, admin_api_key):
        assert client.get('/zones/missing', headers=bearer(admin_api_key)).status_code == 404
        response = client.delete('/zones/missing', headers=bearer(admin_api_key))
        assert response.status_code == 404
        assert response.json()['code'] == 'ZONE_NOT_FOUND'

    def test_delete_removes_files_keeps_audit(self, client, admin_api_key, stored_file):
        client.post(f"/files/{stored_file['file_id']}/access", json=CENTER, headers=bearer(admin_api_key))

        response = client.delete(f"/zones/{stored_file['zone_id']}", headers=bearer(admin_api_key))

        assert response.status_code == 200
        assert client.get('/files', headers=bearer(admin_api_key)).json()['files'] == []
        assert len(audit_entries(client, admin_api_key, file_id=stored_file['file_id'])) == 1


class TestFileEndpoints:

    def test_upload(self, client, admin_api_key, stored_file):
        assert stored_file['original_name'] == 'figures.txt'
        assert stored_file['mime_type'] == 'text/plain'
        assert stored_file['size'] == len(b'quarterly figures')
        assert 'ciphertext' not in stored_file

    def test_upload_is_encrypted_at_rest(self, client, admin_api_key, stored_file):
        with get_db_connection() as conn:
            row = conn.execute(
                'SELECT ciphertext, cipher_format FROM files WHERE file_id = ?',
                (stored_file['file_id'],)
            ).fetchone()

        assert b'quarterly figures' not in bytes(row['ciphertext'])
        assert len(row['ciphertext']) == len(b'quarterly figures') + 28
        assert row['cipher_format'] == 'aes-256-gcm/v1'

    def test_upload_requires_admin(self, client, admin_api_key, user_credentials):
        zone = create_zone(client, admin_api_key)
        response = upload(client, user_credentials[0], zone['zone_id'])
        assert response.status_code == 403

    def test_upload_unknown_zone(self, client, admin_api_key):
        response = upload(client, admin_api_key, 'missing')
        assert response.status_code == 404
        assert response.json()['code'] == 'ZONE_NOT_FOUND'

    def test_upload_empty(self, client, admin_api_key):
        zone = create_zone(client, admin_api_key)
        response = upload(client, admin_api_key, zone['zone_id'], content=b'')
        assert response.status_code == 400
        assert response.json()['code'] == 'EMPTY_UPLOAD'

    def test_upload_too_large(self, client, admin_api_key, monkeypatch):
        monkeypatch.setattr('geovault.services.file_service.MAX_UPLOAD_BYTES', 4)
        zone = create_zone(client, admin_api_key)
        response = upload(client, admin_api_key, zone['zone_id'], content=b'12345')
        assert response.status_code == 413
        assert response.json()['code'] == 'UPLOAD_TOO_LARGE'

    def test_upload_runs_off_event_loop(self, client, admin_api_key, monkeypatch):
        real_upload = FileService.upload_file
        on_event_loop = []

        def recording_upload(self, *args, **kwargs):
            try:
                asyncio.get_running_loop()
                on_event_loop.append(True)
            except RuntimeError:
                on_event_loop.append(False)
            return real_upload(self, *args, **kwargs)

        monkeypatch.setattr(FileService, 'upload_file', recording_upload)
        zone = create_zone(client, admin_api_key)

        response = upload(client, admin_api_key, zone['zone_id'])

        assert response.status_code == 201
        assert on_event_loop == [False]

    def test_list_files(self, client, user_credentials, stored_file):
        response = client.get('/files', headers=bearer(user_credentials[0]))

        assert response.status_code == 200
        [item] = response.json()['files']
        assert item['file_id'] == stored_file['file_id']
        assert item['zone']['name'] == 'London Bridge'
        assert item['zone']['radius_meters'] == 50

    def test_nearby(self, client, user_credentials, stored_file, admin_api_key):
        api_key, _ = user_credentials

        inside = client.post('/files/nearby', json=CENTER, headers=bearer(api_key)).json()['files']
        outside = client.post('/files/nearby', json=ONE_KM_NORTH, headers=bearer(api_key)).json()['files']

        assert [f['file_id'] for f in inside] == [stored_file['file_id']]
        assert outside == []
        assert audit_entries(client, admin_api_key) == []

    @pytest.mark.parametrize('body', [
        {'latitude': 100, 'longitude': 0},
        {'latitude': True, 'longitude': 0},
        {'latitude': 'north', 'longitude': 0},
    ])
    def test_nearby_invalid_location(self, client, user_credentials, body):
        response = client.post('/files/nearby', json=body,
                               headers=bearer(user_credentials[0]))
        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_COORDINATE'

    def test_delete_file(self, client, admin_api_key, stored_file):
        response = client.delete(f"/files/{stored_file['file_id']}", headers=bearer(admin_api_key))
        assert response.status_code == 200

        response = client.delete(f"/files/{stored_file['file_id']}", headers=bearer(admin_api_key))
        assert response.status_code == 404
        assert response.json()['code'] == 'FILE_NOT_FOUND'

    def test_delete_file_requires_admin(self, client, user_credentials, stored_file):
        response = client.delete(f"/files/{stored_file['file_id']}", headers=bearer(user_credentials[0]))
        assert response.status_code == 403


class TestAccessEndpoint:

    def test_granted(self, client, user_credentials, stored_file, admin_api_key):
        api_key, user_id = user_credentials

        response = client.post(f"/files/{stored_file['file_id']}/access", json=CENTER, headers=bearer(api_key))

        assert response.status_code == 200
        assert response.content == b'quarterly figures'
        assert response.headers['content-type'].startswith('text/plain')
        assert 'figures.txt' in response.headers['content-disposition']

        [entry] = audit_entries(client, admin_api_key)
        assert entry['granted'] is True
        assert entry['requester_id'] == user_id
        assert entry['file_id'] == stored_file['file_id']
        assert entry['claimed_latitude'] == 51.5050

    def test_denied(self, client, user_credentials, stored_file, admin_api_key):
        api_key, _ = user_credentials

        response = client.post(f"/files/{stored_file['file_id']}/access", json=ONE_KM_NORTH,
                               headers=bearer(api_key))

        assert response.status_code == 403
        data = response.json()
        assert data['code'] == 'ACCESS_DENIED'
        assert data['granted'] is False
        assert 'distance' not in data
        assert b'quarterly' not in response.content

        [entry] = audit_entries(client, admin_api_key)
        assert entry['granted'] is False

    def test_unknown_file(self, client, user_credentials, admin_api_key):
        response = client.post('/files/missing/access', json=CENTER, headers=bearer(user_credentials[0]))

        assert response.status_code == 404
        assert response.json()['code'] == 'FILE_NOT_FOUND'
        assert audit_entries(client, admin_api_key) == []

    @pytest.mark.parametrize('body', [
        {},
        {'latitude': 51.5050},
        {'latitude': 91, 'longitude': 0},
        {'latitude': 0, 'longitude': 181},
        {'latitude': True, 'longitude': 0},
        {'latitude': 51.5050, 'longitude': False},
        {'latitude': 'north', 'longitude': 0},
        {'latitude': [51.5050], 'longitude': -0.0900},
    ])
    def test_invalid_location(self, client, user_credentials, stored_file, admin_api_key, body):
        response = client.post(f"/files/{stored_file['file_id']}/access", json=body,
                               headers=bearer(user_credentials[0]))

        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_COORDINATE'
        assert audit_entries(client, admin_api_key) == []

    def test_corrupted_ciphertext(self, client, user_credentials, stored_file, admin_api_key):
        with get_db_connection() as conn:
            row = conn.execute('SELECT ciphertext FROM files WHERE file_id = ?',
                               (stored_file['file_id'],)).fetchone()
            corrupted = bytearray(row['ciphertext'])
            corrupted[-1] ^= 0x01
            conn.execute('UPDATE files SET ciphertext = ? WHERE file_id = ?',
                         (bytes(corrupted), stored_file['file_id']))
            conn.commit()

        response = client.post(f"/files/{stored_file['file_id']}/access", json=CENTER,
                               headers=bearer(user_credentials[0]))

        assert response.status_code == 500
        assert response.json()['code'] == 'DECRYPTION_FAILURE'
        assert b'quarterly' not in response.content
        [entry] = audit_entries(client, admin_api_key)
        assert entry['granted'] is True

    def test_audit_failure_voids_grant(self, client, user_credentials, stored_file, monkeypatch):
        def broken_append(entry):
            raise OSError('disk full')

        monkeypatch.setattr(AuditRepository, 'append', staticmethod(broken_append))

        response = client.post(f"/files/{stored_file['file_id']}/access", json=CENTER,
                               headers=bearer(user_credentials[0]))

        assert response.status_code == 503
        assert response.json()['code'] == 'AUDIT_PERSISTENCE_FAILURE'
        assert b'quarterly' not in response.content

    def test_concrete_walkthrough(self, client, user_credentials, stored_file, admin_api_key):
        api_key, _ = user_credentials
        url = f"/files/{stored_file['file_id']}/access"

        assert client.post(url, json=CENTER, headers=bearer(api_key)).status_code == 200
        assert client.post(url, json=ONE_KM_NORTH, headers=bearer(api_key)).status_code == 403
        assert client.post(url, json={'latitude': 51.50502, 'longitude': -0.09003},
                           headers=bearer(api_key)).status_code == 200

        entries = audit_entries(client, admin_api_key, file_id=stored_file['file_id'])
        assert [e['granted'] for e in entries] == [True, False, True]


class TestAuditEndpoint:

    def test_requires_admin(self, client, user_credentials):
        response = client.get('/audit', headers=bearer(user_credentials[0]))
        assert response.status_code == 403

    def test_filters(self, client, user_credentials, stored_file, admin_api_key):
        api_key, user_id = user_credentials
        url = f"/files/{stored_file['file_id']}/access"
        client.post(url, json=CENTER, headers=bearer(api_key))
        client.post(url, json=ONE_KM_NORTH, headers=bearer(api_key))
        client.post(url, json=CENTER, headers=bearer(admin_api_key))

        assert len(audit_entries(client, admin_api_key)) == 3
        assert len(audit_entries(client, admin_api_key, requester_id=user_id)) == 2
        assert len(audit_entries(client, admin_api_key, granted='false')) == 1
        assert len(audit_entries(client, admin_api_key, limit=1)) == 1

    @pytest.mark.parametrize('limit', [0, 1001])
    def test_limit_bounds(self, client, admin_api_key, limit):
        response = client.get('/audit', params={'limit': limit}, headers=bearer(admin_api_key))
        assert response.status_code == 422


class TestDiagnosticsEndpoint:

    def test_encryption_check(self, client, admin_api_key):
        response = client.post('/diagnostics/encryption', json={'text': 'hello'}, headers=bearer(admin_api_key))

        assert response.status_code == 200
        assert response.json() == {
            'success': True,
            'cipher_format': 'aes-256-gcm/v1',
            'plaintext_length': 5,
            'payload_length': 33,
            'overhead_bytes': 28,
        }

    def test_requires_admin(self, client, user_credentials):
        response = client.post('/diagnostics/encryption', json={'text': 'hello'},
                               headers=bearer(user_credentials[0]))
        assert response.status_code == 403


class TestOpenAPI:

    def test_access_errors_documented(self, client):
        responses = client.get('/openapi.json').json()['paths']['/files/{file_id}/access']['post']['responses']

        for code in ('400', '404', '500', '503'):
            assert responses[code]['content']['application/json']['schema']['$ref'].endswith('/ErrorResponse')
        assert responses['403']['content']['application/json']['schema']['$ref'].endswith('/AccessDeniedResponse')
