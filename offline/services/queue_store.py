"""
Durable store for queued submissions.
Rows live in the project database, so they survive process restarts.
Every database failure surfaces as StorageError; nothing is swallowed here.
"""

import logging
import threading
from contextlib import contextmanager

from django.db import DatabaseError, connections
from django.db.models import F

from offline.exceptions import StorageError
from offline.models import QueuedSubmission

logger = logging.getLogger("offline")


@contextmanager
def storage_errors(action: str):
    try:
        yield
    except DatabaseError as e:
        logger.error("Offline queue %s failed: %s", action, e)
        raise StorageError(f"Offline queue {action} failed: {e}") from e


class QueueStore:
    """Keyed table of QueuedSubmission rows."""

    def __init__(self, using: str = "default"):
        self.using = using
        self._lock = threading.Lock()
        self._opened = False

    def open(self) -> None:
        """Create the queue table if absent. Safe to call repeatedly and from several threads."""
        if self._opened:
            return
        with self._lock:
            if self._opened:
                return
            with storage_errors("open"):
                conn = connections[self.using]
                table = QueuedSubmission._meta.db_table
                if table not in conn.introspection.table_names():
                    with conn.schema_editor() as editor:
                        editor.create_model(QueuedSubmission)
                    logger.info("Created offline queue table %s", table)
            self._opened = True

    def _objects(self):
        self.open()
        return QueuedSubmission.objects.using(self.using)

    def put(self, record: QueuedSubmission) -> None:
        """Insert or replace by id."""
        self.open()
        with storage_errors("put"):
            record.save(using=self.using)

    def get_all(self) -> list[QueuedSubmission]:
        with storage_errors("get_all"):
            return list(self._objects().all())

    def increment_retry(self, queued_id: str) -> bool:
        """Single UPDATE; never inserts, so a row deleted meanwhile stays deleted."""
        with storage_errors("increment_retry"):
            return self._objects().filter(pk=queued_id).update(retry_count=F("retry_count") + 1) > 0

    def delete_by_id(self, queued_id: str) -> None:
        """Delete if present; absent ids are not an error."""
        with storage_errors("delete"):
            self._objects().filter(pk=queued_id).delete()

    def count(self) -> int:
        with storage_errors("count"):
            return self._objects().count()
