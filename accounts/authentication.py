"""
Bearer token authentication for the admin API.
"""
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from .tokens import InvalidToken, Unauthenticated, get_auth_gateway


class AdminIdentity:
    """Authenticated admin, built from verified token claims."""

    is_authenticated = True
    is_anonymous = False

    def __init__(self, claims):
        self.claims = claims
        self.username = claims['username']
        self.role = claims.get('role', 'admin')
        self.is_mobile = bool(claims.get('isMobile', False))

    def __str__(self):
        return self.username


class AdminTokenAuthentication(BaseAuthentication):
    """
    Reads ``Authorization: Bearer <token>``.

    No header or an empty token means the request is anonymous (401 from the permission
    check); a header with a bad or expired token is rejected with 403.
    """

    keyword = 'Bearer'

    def authenticate(self, request):
        auth = get_authorization_header(request).split()

        if not auth or auth[0].decode('latin-1').lower() != self.keyword.lower():
            return None

        if len(auth) == 1:
            # Scheme without a token is the same as no token
            return None
        if len(auth) != 2:
            raise exceptions.PermissionDenied('Invalid token header')

        try:
            token = auth[1].decode('utf-8')
        except UnicodeError:
            raise exceptions.PermissionDenied('Invalid token header')

        try:
            claims = get_auth_gateway().verify(token)
        except Unauthenticated:
            return None
        except InvalidToken:
            raise exceptions.PermissionDenied('Invalid or expired token')

        return AdminIdentity(claims), token

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'
