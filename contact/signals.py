"""
Contact Management Signals

Django signals for submission lifecycle events.
"""
import logging

from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)


submission_created = Signal()    # kwargs: record
submission_completed = Signal()  # kwargs: record
submission_deleted = Signal()    # kwargs: submission_id


@receiver(submission_created)
def log_submission_created(sender, record, **kwargs):
    """
    Signal handler for new submissions.

    Can be used for additional logging, notifications, or integrations.
    """
    logger.info("New submission %s", record['id'])


@receiver(submission_completed)
def log_submission_completed(sender, record, **kwargs):
    logger.info("Submission %s marked %s", record['id'], record['status'])


@receiver(submission_deleted)
def log_submission_deleted(sender, submission_id, **kwargs):
    logger.info("Submission %s deleted", submission_id)
