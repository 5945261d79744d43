"""Offline queue errors."""


class StorageError(Exception):
    """Local queue storage failed (quota, permission, corruption)."""


class DeliveryError(Exception):
    """Remote completion call failed (network, non-2xx, timeout)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
