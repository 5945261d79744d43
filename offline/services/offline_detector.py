"""Offline detection. Backend-driven: the API is online if its health path answers."""

import logging

import requests
from django.conf import settings
from django.core.cache import cache

from offline.signals import network_restored

logger = logging.getLogger("offline")

STATE_CACHE_KEY = "offline:last_online"


class OfflineDetector:
    """Probe ECS Connect reachability and announce offline -> online transitions."""

    def __init__(self, base_url: str | None = None, health_path: str | None = None, timeout: int | None = None):
        self.base_url = (base_url if base_url is not None else settings.ECS_API_BASE_URL).rstrip("/")
        self.health_path = health_path if health_path is not None else settings.ECS_HEALTH_PATH
        self.timeout = timeout if timeout is not None else settings.ECS_PROBE_TIMEOUT

    def is_online(self) -> bool:
        """Any answer below 500 counts as reachable; transport errors mean offline."""
        try:
            response = requests.get(self.base_url + self.health_path, timeout=self.timeout)
        except requests.RequestException as e:
            logger.info("Offline detected: %s", e)
            return False
        return response.status_code < 500

    def poll(self) -> bool:
        """Probe once; send network_restored when the last known state was offline."""
        online = self.is_online()
        previous = cache.get(STATE_CACHE_KEY)
        cache.set(STATE_CACHE_KEY, online, timeout=None)
        if online and previous is False:
            logger.info("Connectivity restored to %s", self.base_url)
            network_restored.send(sender=self.__class__)
        return online
