"""
Submission Storage

Abstract store for submission records plus the default implementation
keeping one JSON document per record on disk.
"""
import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path

from django.conf import settings

from core.utils import write_json_atomic

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the underlying medium cannot be read or written."""
    pass


class SubmissionNotFound(Exception):
    """Raised when no record exists for the requested id."""

    def __init__(self, submission_id):
        super().__init__(f"Submission {submission_id!r} not found")
        self.submission_id = submission_id


class SubmissionStore(ABC):
    """
    Interface every submission backend implements.

    Records are plain dicts; the ``id`` key doubles as the storage key.
    """

    @abstractmethod
    def put(self, record):
        """Create or overwrite the record stored under record['id']."""

    @abstractmethod
    def get(self, submission_id):
        """Return the record, raising SubmissionNotFound if absent."""

    @abstractmethod
    def list(self):
        """Return every stored record, in no particular order."""

    @abstractmethod
    def delete(self, submission_id):
        """Remove the record, raising SubmissionNotFound if absent."""

    @abstractmethod
    def exists(self, submission_id):
        """Whether a record is stored under submission_id."""


# Ids are single path components: word characters (accents included) and
# hyphens, no separators, no leading dot
SAFE_ID_PATTERN = re.compile(r'\w[\w\-]*')


class JsonFileSubmissionStore(SubmissionStore):
    """
    One ``<id>.json`` file per record inside ``directory``.

    Writes go through a temporary file and os.replace, so each record is
    either fully present or absent. No locking: concurrent writes to the
    same id are last-writer-wins.
    """

    suffix = '.json'

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, submission_id):
        if not isinstance(submission_id, str) or not SAFE_ID_PATTERN.fullmatch(submission_id):
            return None
        return self.directory / f'{submission_id}{self.suffix}'

    def put(self, record):
        path = self._path(record.get('id'))
        if path is None:
            raise StorageError(f"Refusing to store record with unsafe id {record.get('id')!r}")
        try:
            write_json_atomic(path, record)
        except OSError as e:
            logger.exception("Failed to write submission %s", record['id'])
            raise StorageError(f"Cannot write {path}: {e}") from e

    def get(self, submission_id):
        path = self._path(submission_id)
        if path is None or not path.is_file():
            raise SubmissionNotFound(submission_id)
        return self._read(path)

    def exists(self, submission_id):
        path = self._path(submission_id)
        return path is not None and path.is_file()

    def list(self):
        if not self.directory.exists():
            return []

        records = []
        try:
            paths = sorted(self.directory.glob(f'*{self.suffix}'))
        except OSError as e:
            raise StorageError(f"Cannot list {self.directory}: {e}") from e

        for path in paths:
            try:
                record = self._read(path)
            except SubmissionNotFound:
                # Deleted between the directory scan and the read
                continue
            record['id'] = path.stem
            records.append(record)
        return records

    def delete(self, submission_id):
        path = self._path(submission_id)
        if path is None:
            raise SubmissionNotFound(submission_id)
        try:
            path.unlink()
        except FileNotFoundError:
            raise SubmissionNotFound(submission_id)
        except OSError as e:
            logger.exception("Failed to delete submission %s", submission_id)
            raise StorageError(f"Cannot delete {path}: {e}") from e

    def _read(self, path):
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            raise SubmissionNotFound(path.stem)
        except (OSError, ValueError) as e:
            logger.exception("Failed to read submission file %s", path)
            raise StorageError(f"Cannot read {path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"{path} does not hold a JSON object")
        return data


def get_submission_store():
    """Submission store at the configured location."""
    return JsonFileSubmissionStore(settings.SUBMISSIONS_DIR)
