"""
Tests for the API rate limit and uniform error bodies.
"""
from unittest.mock import patch

import pytest
from django.apps import apps
from rest_framework import status

from core.throttling import RATE_LIMIT_MESSAGE, check_rate_limit, get_client_ip


class TestCheckRateLimit:
    """Test the fixed-window counter."""

    def test_allows_up_to_limit(self):
        results = [check_rate_limit('10.0.0.1', 3, 900, now=1000.0) for _ in range(4)]

        assert [allowed for allowed, _ in results] == [True, True, True, False]

    def test_retry_after_points_to_window_end(self):
        for _ in range(2):
            check_rate_limit('10.0.0.2', 1, 900, now=1000.0)

        allowed, retry_after = check_rate_limit('10.0.0.2', 1, 900, now=1000.0)
        # Window [900, 1800)
        assert allowed is False
        assert retry_after == 800

    def test_new_window_resets_count(self):
        check_rate_limit('10.0.0.3', 1, 900, now=1000.0)
        assert check_rate_limit('10.0.0.3', 1, 900, now=1001.0)[0] is False
        assert check_rate_limit('10.0.0.3', 1, 900, now=1800.0)[0] is True

    def test_clients_counted_separately(self):
        check_rate_limit('10.0.0.4', 1, 900, now=1000.0)
        assert check_rate_limit('10.0.0.5', 1, 900, now=1000.0)[0] is True


class TestClientIp:

    def test_forwarded_for_first_hop(self, rf):
        request = rf.get('/', HTTP_X_FORWARDED_FOR='203.0.113.9, 10.0.0.1')
        assert get_client_ip(request) == '203.0.113.9'

    def test_remote_addr(self, rf):
        request = rf.get('/', REMOTE_ADDR='198.51.100.7')
        assert get_client_ip(request) == '198.51.100.7'


class TestInstalledApps:

    def test_token_blacklist_not_installed(self):
        # Tokens are stateless; nothing issues refresh tokens or revokes them
        assert not apps.is_installed('rest_framework_simplejwt.token_blacklist')
        assert apps.is_installed('rest_framework_simplejwt')

class TestApiRateLimitMiddleware:
    """Test the rate limit applied to every API request."""

    @pytest.fixture(autouse=True)
    def small_quota(self, settings):
        settings.API_RATE_LIMIT = 2

    def test_public_endpoint_throttled(self, api_client):
        payload = {'nombre': 'Ana', 'telefono': '555'}

        with patch('core.throttling.time.time', return_value=5000.0):
            responses = [api_client.post('/api/submit-form', payload) for _ in range(3)]

        assert [r.status_code for r in responses[:2]] == [200, 200]
        assert responses[2].status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert responses[2].json() == {'success': False, 'message': RATE_LIMIT_MESSAGE}
        assert responses[2]['Retry-After'] == '400'

    def test_login_throttled(self, api_client):
        credentials = {'username': 'admin', 'password': 'wrong'}

        with patch('core.throttling.time.time', return_value=5000.0):
            codes = [api_client.post('/api/admin/login', credentials).status_code for _ in range(3)]

        assert codes == [401, 401, 429]

    def test_admin_endpoint_throttled(self, admin_client):
        with patch('core.throttling.time.time', return_value=5000.0):
            codes = [admin_client.get('/api/admin/submissions').status_code for _ in range(3)]

        assert codes == [200, 200, 429]

    def test_rejected_tokens_spend_quota(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')

        with patch('core.throttling.time.time', return_value=5000.0):
            codes = [api_client.get('/api/admin/submissions').status_code for _ in range(3)]

        assert codes == [403, 403, 429]

    def test_anonymous_admin_calls_spend_quota(self, api_client):
        with patch('core.throttling.time.time', return_value=5000.0):
            codes = [api_client.get('/api/admin/submissions').status_code for _ in range(3)]

        assert codes == [401, 401, 429]

    def test_non_api_paths_not_counted(self, client):
        with patch('core.throttling.time.time', return_value=5000.0):
            codes = [client.get('/health').status_code for _ in range(3)]

        assert 429 not in codes
