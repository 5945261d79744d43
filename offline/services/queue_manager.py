"""Queue manager for offline form submissions. Only sanctioned access to the store."""

import logging
import secrets
import time

from offline.models import QueuedSubmission
from offline.services.queue_store import QueueStore

logger = logging.getLogger("offline")

GPS_KEYS = ("latitude", "longitude", "accuracy")


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    """offline-<epoch ms>-<8 hex>; random part keeps same-millisecond ids distinct."""
    return f"offline-{_now_ms()}-{secrets.token_hex(4)}"


def _validate_gps(gps) -> None:
    if gps is None:
        return
    if not isinstance(gps, dict):
        raise ValueError("gps must be a mapping")
    for key in GPS_KEYS:
        if not isinstance(gps.get(key), str):
            raise ValueError(f"gps.{key} must be a string")


class QueueManager:
    """Manage the offline submission queue."""

    def __init__(self, store: QueueStore | None = None):
        self.store = store or QueueStore()

    def enqueue(
        self,
        submission_id: str,
        response_data: dict,
        gps: dict | None = None,
        device_info: dict | None = None,
    ) -> str:
        """Persist a new entry with retry_count=0. Returns its generated id."""
        if not submission_id or not isinstance(submission_id, str):
            raise ValueError("submission_id is required")
        if not isinstance(response_data, dict):
            raise ValueError("response_data must be a mapping")
        if device_info is not None and not isinstance(device_info, dict):
            raise ValueError("device_info must be a mapping")
        _validate_gps(gps)

        record = QueuedSubmission(
            id=_new_id(),
            submission_id=submission_id,
            response_data=response_data,
            gps=dict(gps) if gps else None,
            device_info=device_info,
            queued_at=_now_ms(),
            retry_count=0,
        )
        self.store.put(record)
        logger.info(
            "Queued offline submission %s for %s",
            record.id, submission_id,
            extra={"queued_id": record.id, "submission_id": submission_id},
        )
        return record.id

    def get_all(self) -> list[QueuedSubmission]:
        return self.store.get_all()

    def remove(self, queued_id: str) -> None:
        self.store.delete_by_id(queued_id)

    def increment_retry(self, queued_id: str) -> None:
        """Bump retry_count by one. No-op if the entry is already gone."""
        if not self.store.increment_retry(queued_id):
            logger.debug("Retry bump skipped, %s already removed", queued_id, extra={"queued_id": queued_id})

    def count(self) -> int:
        return self.store.count()
