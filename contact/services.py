"""
Submission Services

Intake and admin operations over the submission store. Views stay thin
and call into these functions.
"""
import re
import unicodedata
from datetime import datetime, timezone as dt_timezone

from django.utils import timezone

from core.utils import isoformat, iso_now, parse_timestamp
from .signals import submission_completed, submission_created, submission_deleted


# ==============================================================================
# STATUS
# ==============================================================================

STATUS_PENDING = 'Pending'
STATUS_COMPLETED = 'Completed'
STATUS_URGENT = 'Urgent'

STATUS_CHOICES = [
    (STATUS_PENDING, 'Pending'),
    (STATUS_COMPLETED, 'Completed'),
    (STATUS_URGENT, 'Urgent'),
]

# Labels written by the previous Spanish-language deployment
LEGACY_STATUS_ALIASES = {
    'Pendiente': STATUS_PENDING,
    'Completado': STATUS_COMPLETED,
    'Urgente': STATUS_URGENT,
}


def normalize_status(value):
    """Canonical status for a stored value; unset or blank means Pending."""
    if not value:
        return STATUS_PENDING
    return LEGACY_STATUS_ALIASES.get(value, value)


# ==============================================================================
# INTAKE
# ==============================================================================

class ValidationError(Exception):
    """Raised when a submission is missing required fields."""
    pass


NAME_FIELDS = ('nombre', 'name')
PHONE_FIELDS = ('telefono', 'phone')

DATE_FIELD = 'submissionDate'
LEGACY_DATE_FIELD = 'fechaSolicitud'

# Fallback when nothing of the name survives sanitizing
DEFAULT_ID_PREFIX = 'submission'


def _first_present(fields, names):
    for name in names:
        value = fields.get(name)
        if isinstance(value, str) and value.strip():
            return value
    return None


def sanitize_name(name):
    """
    Lowercase name and reduce it to ``[a-z0-9_]``.

    Accented letters fold to their base letter, every other character
    becomes ``_``, runs of ``_`` collapse and edge underscores are trimmed.
    """
    folded = unicodedata.normalize('NFKD', name.lower())
    folded = ''.join(c for c in folded if not unicodedata.combining(c))
    safe = re.sub(r'[^a-z0-9]', '_', folded)
    safe = re.sub(r'_{2,}', '_', safe)
    return safe.strip('_')


def format_id_timestamp(now):
    """ISO-8601 timestamp with ':' and '.' replaced so it is filename safe."""
    return re.sub(r'[:.]', '-', isoformat(now))


def make_submission_id(name, now=None):
    """Sanitized name plus a timestamp suffix, e.g. ``jose_ruiz-2026-01-02T03-04-05-678Z``."""
    if now is None:
        now = timezone.now()
    return f"{sanitize_name(name) or DEFAULT_ID_PREFIX}-{format_id_timestamp(now)}"


def submit(fields, store):
    """
    Validate and persist a contact-form submission.

    Args:
        fields: Flat mapping of caller-supplied string fields
        store: SubmissionStore to write to

    Returns:
        str: The new submission id

    Raises:
        ValidationError: name or phone field missing or blank
        StorageError: the record could not be written
    """
    name = _first_present(fields, NAME_FIELDS)
    phone = _first_present(fields, PHONE_FIELDS)
    if not name or not phone:
        raise ValidationError("Name and phone are required fields")

    now = timezone.now()
    base_id = make_submission_id(name, now)
    submission_id = base_id

    # Same name within the same millisecond
    suffix = 2
    while store.exists(submission_id):
        submission_id = f"{base_id}-{suffix}"
        suffix += 1

    record = dict(fields)
    # Stamped only by complete
    record.pop('updatedAt', None)
    record['id'] = submission_id
    record[DATE_FIELD] = isoformat(now)
    record['status'] = STATUS_PENDING

    store.put(record)
    submission_created.send(sender=submit, record=record)
    return submission_id


# ==============================================================================
# ADMIN OPERATIONS
# ==============================================================================

_OLDEST = datetime.min.replace(tzinfo=dt_timezone.utc)


def submission_date(record):
    """Submission timestamp, falling back to the legacy date field."""
    return parse_timestamp(record.get(DATE_FIELD) or record.get(LEGACY_DATE_FIELD))


def summarize(records, limit=100, status=None):
    """
    Counts by status over all records plus the newest ``limit`` of them.

    Args:
        records: Every stored record
        limit: Maximum number of records returned
        status: Optional canonical status narrowing the returned list only

    Returns:
        dict: total, completed, pending, urgent and submissions
    """
    statuses = [normalize_status(r.get('status')) for r in records]

    ordered = sorted(
        records,
        key=lambda r: submission_date(r) or _OLDEST,
        reverse=True
    )
    if status:
        ordered = [r for r in ordered if normalize_status(r.get('status')) == status]

    return {
        'total': len(records),
        'completed': statuses.count(STATUS_COMPLETED),
        'pending': statuses.count(STATUS_PENDING),
        'urgent': statuses.count(STATUS_URGENT),
        'submissions': ordered[:limit],
    }


def complete(submission_id, store):
    """
    Mark a submission Completed and stamp updatedAt.

    Raises:
        SubmissionNotFound: no record with that id (from the store)
    """
    record = store.get(submission_id)
    record['id'] = submission_id
    record['status'] = STATUS_COMPLETED
    record['updatedAt'] = iso_now()
    store.put(record)
    submission_completed.send(sender=complete, record=record)
    return record


def delete(submission_id, store):
    """
    Remove a submission.

    Raises:
        SubmissionNotFound: no record with that id
    """
    store.delete(submission_id)
    submission_deleted.send(sender=delete, submission_id=submission_id)
