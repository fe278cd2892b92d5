"""
Shared pytest fixtures.
"""
import pytest
from django.core.cache import cache
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear cache before and after each test so rate limit windows start empty."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def storage_dirs(settings, tmp_path):
    """Point credential and submission storage at a per-test directory."""
    from accounts.credentials import get_credential_store

    settings.DATA_DIR = tmp_path / 'data'
    settings.CREDENTIALS_FILE = settings.DATA_DIR / 'admin.json'
    settings.SUBMISSIONS_DIR = tmp_path / 'submissions'
    get_credential_store().initialize_if_absent()
    return tmp_path


@pytest.fixture
def store():
    from contact.storage import get_submission_store
    return get_submission_store()


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture
def admin_token():
    from accounts.tokens import get_auth_gateway
    return get_auth_gateway().login('admin', 'admin123').token


@pytest.fixture
def admin_client(admin_token):
    """API client carrying a valid admin bearer token."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {admin_token}')
    return client
