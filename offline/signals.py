"""Environment signals that can start a queue drain."""

from django.dispatch import Signal

# Backend went from unreachable to reachable.
network_restored = Signal()

# Device UI came back to the foreground.
app_visible = Signal()
