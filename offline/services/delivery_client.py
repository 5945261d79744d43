"""
HTTP client for the ECS Connect form completion endpoint.
One request per call: no adapter retries, the drain decides when to try again.
Success is any 2xx; everything else raises DeliveryError.
"""

import logging

import requests
from django.conf import settings
from requests.adapters import HTTPAdapter

from offline.exceptions import DeliveryError

logger = logging.getLogger("offline")

COMPLETE_PATH = "/api/form-submissions/{submission_id}/complete"


def requests_session_single_attempt() -> requests.Session:
    """Session whose adapters never retry on their own."""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=0)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def completion_payload(response_data: dict, gps: dict | None, device_info: dict | None, offline: bool = True) -> dict:
    """Completion body. None-valued keys are left out; offline marks a replay from the queue."""
    payload = {"responseData": response_data}
    if gps is not None:
        payload["gps"] = gps
    if device_info is not None:
        payload["deviceInfo"] = device_info
    payload["offline"] = offline
    return payload


class DeliveryClient:
    """POST completions to {base_url}/api/form-submissions/<id>/complete."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: int | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url if base_url is not None else settings.ECS_API_BASE_URL).rstrip("/")
        self.token = token if token is not None else settings.ECS_API_TOKEN
        self.timeout = timeout if timeout is not None else settings.ECS_API_TIMEOUT
        self.session = session or requests_session_single_attempt()

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def complete_url(self, submission_id: str) -> str:
        return self.base_url + COMPLETE_PATH.format(submission_id=submission_id)

    def post_completion(self, submission_id: str, payload: dict) -> requests.Response:
        url = self.complete_url(submission_id)
        try:
            response = self.session.post(url, json=payload, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Completion request for %s failed: %s", submission_id, e,
                           extra={"submission_id": submission_id})
            raise DeliveryError(str(e)) from e

        if not 200 <= response.status_code < 300:
            body = (response.text or "")[:500]
            logger.warning(
                "Completion for %s rejected: HTTP %s %s", submission_id, response.status_code, body,
                extra={"submission_id": submission_id, "status_code": response.status_code},
            )
            raise DeliveryError(f"HTTP {response.status_code}: {body}", status_code=response.status_code)
        return response

    def complete(self, entry) -> requests.Response:
        """Deliver one queued submission, flagged as offline-originated."""
        payload = completion_payload(entry.response_data, entry.gps, entry.device_info)
        return self.post_completion(entry.submission_id, payload)
