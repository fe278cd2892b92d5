"""
Tests for admin credentials, token issuance and login endpoints.
"""
import json
from datetime import timedelta

import pytest
from django.apps import apps
from django.core.exceptions import ImproperlyConfigured
from rest_framework import status

from accounts.credentials import (
    CredentialRecord,
    CredentialStore,
    CredentialStoreError,
    get_credential_store,
)
from accounts.tokens import (
    AuthGateway,
    InvalidCredentials,
    InvalidToken,
    Unauthenticated,
    get_auth_gateway,
)


class TestCredentialStore:
    """Test the singleton admin credential file."""

    def test_default_record_created(self, settings):
        record = get_credential_store().get()

        assert record.username == 'admin'
        assert record.email == 'admin@example.com'
        assert record.check_password('admin123')
        assert record.password_hash != 'admin123'
        assert record.created_at

    def test_file_uses_stable_field_names(self, settings):
        with open(settings.CREDENTIALS_FILE, encoding='utf-8') as f:
            data = json.load(f)

        assert set(data) >= {'username', 'passwordHash', 'email', 'createdAt'}
        assert 'password' not in data

    def test_initialize_is_idempotent(self):
        store = get_credential_store()
        before = store.get()

        assert store.initialize_if_absent() is False
        assert store.get().password_hash == before.password_hash

    def test_replace_updates_record(self):
        store = get_credential_store()
        record = store.get()
        record.set_password('s3cure-pass')
        record.email = 'ops@example.com'

        store.replace(record)

        stored = store.get()
        assert stored.check_password('s3cure-pass')
        assert not stored.check_password('admin123')
        assert stored.email == 'ops@example.com'
        assert stored.updated_at

    def test_get_missing_file(self, tmp_path):
        with pytest.raises(CredentialStoreError):
            CredentialStore(tmp_path / 'missing.json').get()

    def test_round_trip_dict(self):
        record = CredentialRecord.create('root', 'pw', 'root@example.com')
        assert CredentialRecord.from_dict(record.to_dict()) == record

    def test_startup_failure_is_fatal(self, monkeypatch):
        def fail(self):
            raise CredentialStoreError('read-only filesystem')

        monkeypatch.setattr(CredentialStore, 'initialize_if_absent', fail)

        with pytest.raises(ImproperlyConfigured):
            apps.get_app_config('accounts').ready()


class TestAuthGateway:
    """Test login and token verification."""

    def test_login_returns_verifiable_token(self):
        gateway = get_auth_gateway()
        issued = gateway.login('admin', 'admin123')

        claims = gateway.verify(issued.token)
        assert claims['username'] == 'admin'
        assert claims['exp'] - claims['iat'] == 24 * 60 * 60
        assert 'isMobile' not in claims

    def test_mobile_login_claims(self):
        gateway = get_auth_gateway()
        issued = gateway.login('admin', 'admin123', mobile=True)

        claims = gateway.verify(issued.token)
        assert claims['role'] == 'admin'
        assert claims['isMobile'] is True
        assert claims['exp'] - claims['iat'] == 7 * 24 * 60 * 60

    @pytest.mark.parametrize('username,password', [
        ('admin', 'wrong'),
        ('someone', 'admin123'),
        ('', ''),
    ])
    def test_bad_credentials(self, username, password):
        with pytest.raises(InvalidCredentials):
            get_auth_gateway().login(username, password)

    def test_missing_token(self):
        with pytest.raises(Unauthenticated):
            get_auth_gateway().verify('')

    def test_garbage_token(self):
        with pytest.raises(InvalidToken):
            get_auth_gateway().verify('abc.def.ghi')

    def test_token_signed_with_other_key(self):
        store = get_credential_store()
        forged = AuthGateway(
            store.get,
            signing_key='another-signing-key-of-sufficient-length',
        ).login('admin', 'admin123')

        with pytest.raises(InvalidToken):
            get_auth_gateway().verify(forged.token)

    def test_expired_token(self):
        store = get_credential_store()
        gateway = get_auth_gateway()
        expired = AuthGateway(
            store.get,
            signing_key=gateway.backend.signing_key,
            admin_lifetime=timedelta(seconds=-60),
        ).login('admin', 'admin123')

        with pytest.raises(InvalidToken):
            gateway.verify(expired.token)

    def test_credentials_read_at_login(self):
        store = get_credential_store()
        gateway = get_auth_gateway()
        record = store.get()
        record.set_password('rotated')
        store.replace(record)

        with pytest.raises(InvalidCredentials):
            gateway.login('admin', 'admin123')
        assert gateway.login('admin', 'rotated').username == 'admin'


class TestLoginEndpoints:
    """Test the admin and mobile login views."""

    def test_admin_login(self, api_client):
        response = api_client.post('/api/admin/login', {'username': 'admin', 'password': 'admin123'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert get_auth_gateway().verify(response.data['token'])['username'] == 'admin'
        assert 'user' not in response.data

    def test_mobile_login(self, api_client):
        response = api_client.post('/api/mobile/login', {'username': 'admin', 'password': 'admin123'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user'] == {
            'username': 'admin',
            'email': 'admin@example.com',
            'role': 'admin',
        }
        assert get_auth_gateway().verify(response.data['token'])['isMobile'] is True

    @pytest.mark.parametrize('url', ['/api/admin/login', '/api/mobile/login'])
    def test_wrong_password(self, api_client, url):
        response = api_client.post(url, {'username': 'admin', 'password': 'nope'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data == {'success': False, 'message': 'Invalid credentials'}

    @pytest.mark.parametrize('payload', [
        {'username': 'admin'},
        {'password': 'admin123'},
        {'username': '', 'password': ''},
    ])
    def test_missing_fields(self, api_client, payload):
        response = api_client.post('/api/admin/login', payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False

    def test_token_opens_admin_api(self, api_client):
        token = api_client.post(
            '/api/admin/login', {'username': 'admin', 'password': 'admin123'}
        ).data['token']

        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        assert api_client.get('/api/admin/submissions').status_code == status.HTTP_200_OK

    def test_mobile_token_opens_admin_api(self, api_client):
        token = api_client.post(
            '/api/mobile/login', {'username': 'admin', 'password': 'admin123'}
        ).data['token']

        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        assert api_client.get('/api/admin/submissions').status_code == status.HTTP_200_OK

    def test_bearer_without_token_is_unauthenticated(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer')
        response = api_client.get('/api/admin/submissions')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_malformed_authorization_header(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer abc def')
        response = api_client.get('/api/admin/submissions')
        assert response.status_code == status.HTTP_403_FORBIDDEN
