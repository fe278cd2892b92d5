"""
Auth Gateway

Issues and verifies the signed bearer tokens that guard the admin API.
Tokens are HS256 JWTs carrying the admin username plus iat/exp; expiry is
their only lifecycle bound.
"""
import logging
from dataclasses import dataclass

from django.conf import settings
from django.utils import timezone
from rest_framework_simplejwt.backends import TokenBackend
from rest_framework_simplejwt.exceptions import TokenBackendError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.utils import datetime_to_epoch

from .credentials import get_credential_store

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for authentication failures."""
    pass


class InvalidCredentials(AuthError):
    """Username does not match or the password check failed."""
    pass


class Unauthenticated(AuthError):
    """No bearer token was presented."""
    pass


class InvalidToken(AuthError):
    """Token signature or expiry check failed."""
    pass


@dataclass
class IssuedToken:
    token: str
    username: str
    email: str
    role: str = None


class AuthGateway:
    """
    Login and token verification for the admin identity.

    Args:
        credentials: Callable returning the current CredentialRecord
        signing_key: Secret used to sign tokens
        algorithm: JWT algorithm, HS256 by default
    """

    MOBILE_ROLE = 'admin'

    def __init__(self, credentials, signing_key, algorithm='HS256',
                 admin_lifetime=None, mobile_lifetime=None):
        self.credentials = credentials
        self.backend = TokenBackend(algorithm, signing_key=signing_key)
        self.admin_lifetime = admin_lifetime or settings.ADMIN_TOKEN_LIFETIME
        self.mobile_lifetime = mobile_lifetime or settings.MOBILE_TOKEN_LIFETIME

    def login(self, username, password, mobile=False):
        """
        Check username/password against the admin record and issue a token.

        Console tokens carry only the username; mobile tokens also carry
        role and isMobile claims and live longer.

        Raises:
            InvalidCredentials: on unknown username or wrong password
        """
        record = self.credentials()

        if record.username != username or not record.check_password(password):
            logger.warning("Failed %s login attempt for username %r",
                           'mobile' if mobile else 'admin', username)
            raise InvalidCredentials("Invalid credentials")

        claims = {'username': record.username}
        if mobile:
            claims['role'] = self.MOBILE_ROLE
            claims['isMobile'] = True
            lifetime = self.mobile_lifetime
        else:
            lifetime = self.admin_lifetime

        logger.info("Issued %s token for %s", 'mobile' if mobile else 'admin', record.username)
        return IssuedToken(
            token=self.issue(claims, lifetime),
            username=record.username,
            email=record.email,
            role=claims.get('role'),
        )

    def issue(self, claims, lifetime):
        now = timezone.now()
        payload = dict(claims)
        payload['iat'] = datetime_to_epoch(now)
        payload['exp'] = datetime_to_epoch(now + lifetime)
        return self.backend.encode(payload)

    def verify(self, token):
        """
        Validate a bearer token and return its claims.

        Raises:
            Unauthenticated: when token is empty
            InvalidToken: on bad signature, expiry or missing username
        """
        if not token:
            raise Unauthenticated("Authentication credentials were not provided")

        try:
            claims = self.backend.decode(token, verify=True)
        except TokenBackendError as e:
            raise InvalidToken(str(e)) from e

        if not claims.get('username'):
            raise InvalidToken("Token carries no username")

        return claims


def get_auth_gateway():
    """Gateway bound to the configured credential store and signing key."""
    return AuthGateway(
        credentials=get_credential_store().get,
        signing_key=api_settings.SIGNING_KEY,
        algorithm=api_settings.ALGORITHM,
    )
