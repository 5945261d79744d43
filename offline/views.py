"""Offline queue JSON endpoints for the device UI. Delivery failures never reach the user as errors on sync."""

import json

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from offline.exceptions import DeliveryError, StorageError
from offline.services.delivery_client import DeliveryClient, completion_payload
from offline.services.offline_detector import OfflineDetector
from offline.services.queue_drainer import QueueDrainer
from offline.services.queue_manager import QueueManager
from offline.signals import app_visible


STORAGE_ERROR_MESSAGE = "Could not save offline. Try resubmitting."


def _parse_body(request) -> dict | None:
    try:
        data = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


@csrf_exempt
@require_POST
def submit_completion(request, submission_id):
    """
    POST /offline/submissions/<submission_id>/complete/
    Offline: queue locally, 202. Online: deliver now, 200 or 502.
    """
    data = _parse_body(request)
    if data is None:
        return JsonResponse({"error": "Invalid JSON body"}, status=400)
    response_data = data.get("responseData")
    gps = data.get("gps")
    device_info = data.get("deviceInfo")

    if not OfflineDetector().is_online():
        try:
            queued_id = QueueManager().enqueue(submission_id, response_data, gps=gps, device_info=device_info)
        except ValueError as e:
            return JsonResponse({"error": str(e)}, status=400)
        except StorageError:
            return JsonResponse({"error": STORAGE_ERROR_MESSAGE}, status=503)
        return JsonResponse(
            {"offline": True, "queuedId": queued_id, "message": "Saved offline. It will sync when you're back online."},
            status=202,
        )

    if not isinstance(response_data, dict):
        return JsonResponse({"error": "responseData must be a mapping"}, status=400)
    payload = completion_payload(response_data, gps, device_info, offline=False)
    try:
        DeliveryClient().post_completion(submission_id, payload)
    except DeliveryError as e:
        return JsonResponse({"error": str(e), "status_code": e.status_code}, status=502)
    return JsonResponse({"offline": False})


@require_GET
def queue_status(request):
    """GET /offline/status/ - pending count and reachability."""
    try:
        pending = QueueManager().count()
    except StorageError as e:
        return JsonResponse({"error": str(e)}, status=503)
    return JsonResponse({"pending": pending, "online": OfflineDetector().is_online()})


@csrf_exempt
@require_POST
def retry_submit(request):
    """POST /offline/retry/ - manual drain. Returns {"synced", "failed"}."""
    try:
        result = QueueDrainer().drain()
    except StorageError as e:
        return JsonResponse({"error": str(e)}, status=503)
    return JsonResponse(result)


@csrf_exempt
@require_POST
def app_resumed(request):
    """POST /offline/resume/ - the UI is visible again; auto-sync drains if online."""
    app_visible.send(sender=app_resumed)
    try:
        pending = QueueManager().count()
    except StorageError as e:
        return JsonResponse({"error": str(e)}, status=503)
    return JsonResponse({"pending": pending})
