"""
Shared helpers for the JSON documents kept on disk.
"""
import json
import os
import tempfile
from datetime import datetime, timezone as dt_timezone

from django.utils import timezone


def isoformat(dt):
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    return dt.astimezone(dt_timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def iso_now():
    return isoformat(timezone.now())


def parse_timestamp(value):
    """
    Parse a stored ISO-8601 timestamp.

    Returns an aware datetime, or None when the value is missing or malformed.
    Naive values are taken as UTC.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt_timezone.utc)
    return parsed


def write_json_atomic(path, data):
    """
    Write data as indented JSON to path.

    The document goes to a temporary file in the same directory first and
    is moved into place with os.replace, so readers never see a partial file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f'.{path.stem}-', suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
