"""
Queue drainer. Attempts every queued submission once per call.
Failures never stop the pass; each entry is reconciled on its own.
Retries are unbounded and immediate: an entry stays queued until it is accepted.
"""

import logging

from django.db import DatabaseError

from offline.exceptions import DeliveryError
from offline.models import SubmissionAttempt
from offline.services.delivery_client import DeliveryClient
from offline.services.queue_manager import QueueManager

logger = logging.getLogger("offline")


class QueueDrainer:
    """Deliver queued submissions and reconcile the queue with the outcome."""

    def __init__(self, manager: QueueManager | None = None, client: DeliveryClient | None = None):
        self.manager = manager or QueueManager()
        self.client = client or DeliveryClient()

    def _record_attempt(self, entry, success: bool, status_code: int | None, error: str = "") -> None:
        """Audit only. The queue is already reconciled, so a failed write is logged and skipped."""
        try:
            SubmissionAttempt.objects.using(self.manager.store.using).create(
                queued_id=entry.id,
                submission_id=entry.submission_id,
                success=success,
                response_status_code=status_code,
                error_message=error,
                prior_retries=entry.retry_count,
            )
        except DatabaseError:
            logger.exception("Could not record delivery attempt for %s", entry.id,
                             extra={"queued_id": entry.id, "submission_id": entry.submission_id})

    def drain(self) -> dict:
        """
        Deliver every entry in the current snapshot.
        Returns {"synced": int, "failed": int}.
        StorageError from the queue propagates; DeliveryError never does.
        """
        pending = self.manager.get_all()
        result = {"synced": 0, "failed": 0}

        for entry in pending:
            extra = {"queued_id": entry.id, "submission_id": entry.submission_id}
            try:
                response = self.client.complete(entry)
            except DeliveryError as e:
                self.manager.increment_retry(entry.id)
                self._record_attempt(entry, False, e.status_code, str(e))
                result["failed"] += 1
                logger.info("Offline submission %s not synced (attempt %d): %s",
                            entry.id, entry.retry_count + 1, e, extra=extra)
                continue

            self.manager.remove(entry.id)
            self._record_attempt(entry, True, response.status_code)
            result["synced"] += 1
            logger.info("Offline submission %s synced", entry.id, extra=extra)

        if result["synced"] or result["failed"]:
            logger.info("Offline queue drained: synced=%d failed=%d", result["synced"], result["failed"])
        return result
