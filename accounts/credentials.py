"""
Admin Credential Store

Holds the single admin identity as one JSON document on disk.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password

from core.utils import iso_now, write_json_atomic

logger = logging.getLogger(__name__)


class CredentialStoreError(Exception):
    """Raised when the credential file cannot be read or written."""
    pass


@dataclass
class CredentialRecord:
    username: str
    password_hash: str
    email: str
    created_at: str
    updated_at: str = None

    @classmethod
    def create(cls, username, password, email):
        """Build a fresh record, hashing the raw password."""
        now = iso_now()
        return cls(
            username=username,
            password_hash=make_password(password),
            email=email,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_dict(cls, data):
        return cls(
            username=data['username'],
            password_hash=data['passwordHash'],
            email=data.get('email', ''),
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
        )

    def to_dict(self):
        data = {
            'username': self.username,
            'passwordHash': self.password_hash,
            'email': self.email,
            'createdAt': self.created_at,
        }
        if self.updated_at:
            data['updatedAt'] = self.updated_at
        return data

    def check_password(self, raw_password):
        return check_password(raw_password, self.password_hash)

    def set_password(self, raw_password):
        self.password_hash = make_password(raw_password)


class CredentialStore:
    """
    File-backed singleton admin credential.

    The record is created once by initialize_if_absent() and afterwards
    only changes through replace().
    """

    def __init__(self, path):
        self.path = Path(path)

    def exists(self):
        return self.path.exists()

    def get(self):
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return CredentialRecord.from_dict(json.load(f))
        except (OSError, ValueError, KeyError) as e:
            raise CredentialStoreError(f"Cannot read admin credentials from {self.path}: {e}") from e

    def replace(self, record):
        """Persist record as the admin identity, stamping updatedAt."""
        record.updated_at = iso_now()
        self._write(record)
        logger.info("Admin credentials updated for %s", record.username)

    def initialize_if_absent(self):
        """
        Write the default admin identity if no credential file exists.

        Returns:
            bool: True if a record was created
        """
        if self.exists():
            return False

        record = CredentialRecord.create(
            username=settings.DEFAULT_ADMIN_USERNAME,
            password=settings.DEFAULT_ADMIN_PASSWORD,
            email=settings.DEFAULT_ADMIN_EMAIL,
        )
        self._write(record)
        logger.warning(
            "Created default admin credentials at %s. Change the password before production use.",
            self.path
        )
        return True

    def _write(self, record):
        try:
            write_json_atomic(self.path, record.to_dict())
        except OSError as e:
            raise CredentialStoreError(f"Cannot write admin credentials to {self.path}: {e}") from e


def get_credential_store():
    """Credential store at the configured location."""
    return CredentialStore(settings.CREDENTIALS_FILE)
