"""Offline queue services."""

from .queue_store import QueueStore
from .queue_manager import QueueManager
from .delivery_client import DeliveryClient
from .queue_drainer import QueueDrainer
from .offline_detector import OfflineDetector
from .auto_sync import AutoSync
