"""
Settings for the pytest suite.

Provides throwaway secrets and storage directories, a fast password hasher
and a local-memory cache.
"""
import os
import tempfile

os.environ.setdefault('SECRET_KEY', 'test-secret-key-not-for-production')
os.environ.setdefault('JWT_SECRET', 'test-jwt-secret-not-for-production')

from .settings import *  # noqa: E402,F401,F403

_TEST_ROOT = Path(tempfile.mkdtemp(prefix='contact-intake-tests-'))  # noqa: F405

DATA_DIR = _TEST_ROOT / 'data'
CREDENTIALS_FILE = DATA_DIR / 'admin.json'
SUBMISSIONS_DIR = _TEST_ROOT / 'submissions'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

CORS_ALLOW_ALL_ORIGINS = True

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'contact-intake-tests',
    }
}

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    'TEST_REQUEST_DEFAULT_FORMAT': 'json',
}
