"""
Accounts App Configuration

Admin credential storage and bearer token authentication.
"""
import logging

from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)


class AccountsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'accounts'
    verbose_name = 'Admin Accounts'

    def ready(self):
        """Make sure the admin credential exists before any login is served."""
        from .credentials import CredentialStoreError, get_credential_store

        store = get_credential_store()
        try:
            store.initialize_if_absent()
            record = store.get()
        except CredentialStoreError as e:
            raise ImproperlyConfigured(f"Admin credential store failed to initialize: {e}") from e

        if record.check_password(settings.DEFAULT_ADMIN_PASSWORD):
            logger.warning(
                "Admin account %r still uses the default password. Rotate it before production use.",
                record.username
            )
