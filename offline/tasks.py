"""
Celery tasks for the offline submission queue.

Tasks: drain_queue_task, poll_connectivity_task.
Worker start drains once if the API is reachable (startup trigger).
"""

import logging
from typing import Any

from celery import shared_task
from celery.signals import worker_ready
from django.apps import apps

from offline.exceptions import StorageError
from offline.services.offline_detector import OfflineDetector
from offline.services.queue_drainer import QueueDrainer

logger = logging.getLogger("offline")


@shared_task(bind=True, name="offline.drain_queue_task")
def drain_queue_task(self) -> dict[str, Any]:
    """
    Drain the offline queue once.
    Returns {"success": True, "synced": N, "failed": M} or {"success": False, "error": str}.
    """
    try:
        result = QueueDrainer().drain()
    except StorageError as e:
        logger.exception("drain_queue_task failed")
        return {"success": False, "error": str(e)}
    return {"success": True, **result}


@shared_task(bind=True, name="offline.poll_connectivity_task")
def poll_connectivity_task(self) -> dict[str, Any]:
    """Probe the API; a restored connection fires network_restored, which auto-sync turns into a drain."""
    return {"online": OfflineDetector().poll()}


def schedule_drain() -> None:
    """Auto-sync callback: hand the drain to a worker."""
    drain_queue_task.delay()


@worker_ready.connect
def drain_on_worker_ready(sender=None, **kwargs) -> None:
    """Drain entries left over from a previous session once the worker is up."""
    auto_sync = apps.get_app_config("offline").auto_sync
    if auto_sync is not None:
        auto_sync.drain_if_online("startup")
