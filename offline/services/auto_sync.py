"""
Auto-sync trigger. Decides when to drain, never how.

Drains on:
  - network_restored
  - app_visible, while the backend is reachable
  - start(), if the backend is reachable at that moment (unless drain_now=False;
    the app then calls drain_if_online("startup") once the process is up)
"""

import logging
from typing import Callable

from offline.services.offline_detector import OfflineDetector
from offline.signals import app_visible, network_restored

logger = logging.getLogger("offline")


class AutoSync:
    """Bind a drain callback to connectivity and visibility signals."""

    def __init__(self, detector: OfflineDetector | None = None):
        self.detector = detector or OfflineDetector()
        self._callback: Callable[[], object] | None = None
        self._uid = f"offline.auto_sync.{id(self)}"

    @property
    def started(self) -> bool:
        return self._callback is not None

    def _run(self, reason: str) -> None:
        if self._callback is None:
            return
        logger.info("Draining offline queue (%s)", reason)
        try:
            result = self._callback()
        except Exception:
            logger.exception("Offline queue drain failed (%s)", reason)
            return
        if isinstance(result, dict) and (result.get("synced") or result.get("failed")):
            logger.info("Synced: %s, Failed: %s", result.get("synced"), result.get("failed"))

    def _on_network_restored(self, sender, **kwargs):
        self._run("network restored")

    def drain_if_online(self, reason: str) -> None:
        if self._callback is not None and self.detector.is_online():
            self._run(reason)

    def _on_app_visible(self, sender, **kwargs):
        self.drain_if_online("app visible")

    def start(self, callback: Callable[[], object], drain_now: bool = True) -> None:
        """Connect receivers; drain once now if online and drain_now is set."""
        self._callback = callback
        network_restored.connect(self._on_network_restored, weak=False, dispatch_uid=self._uid)
        app_visible.connect(self._on_app_visible, weak=False, dispatch_uid=self._uid)
        if drain_now:
            self.drain_if_online("startup")

    def stop(self) -> None:
        network_restored.disconnect(dispatch_uid=self._uid)
        app_visible.disconnect(dispatch_uid=self._uid)
        self._callback = None
