"""Tests for the completion endpoint client."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import requests
from django.test import SimpleTestCase, override_settings

from offline.exceptions import DeliveryError
from offline.services.delivery_client import DeliveryClient, completion_payload

GPS = {"latitude": "1.000000", "longitude": "2.000000", "accuracy": "3.0"}


def _entry(**overrides):
    fields = {"submission_id": "sub-1", "response_data": {"passOrFail": "Pass"}, "gps": None, "device_info": None}
    fields.update(overrides)
    return SimpleNamespace(**fields)


def _session(status_code=200, text=""):
    session = MagicMock()
    session.post.return_value = MagicMock(status_code=status_code, text=text)
    return session


class CompletionPayloadTests(SimpleTestCase):
    def test_omits_missing_optional_fields(self):
        self.assertEqual(completion_payload({"a": 1}, None, None), {"responseData": {"a": 1}, "offline": True})

    def test_includes_gps_and_device_info(self):
        payload = completion_payload({}, GPS, {"platform": "iPad"})
        self.assertEqual(payload["gps"], GPS)
        self.assertEqual(payload["deviceInfo"], {"platform": "iPad"})
        self.assertTrue(payload["offline"])

    def test_direct_submission_is_not_flagged_offline(self):
        payload = completion_payload({"a": 1}, None, {"platform": "iPad"}, offline=False)
        self.assertEqual(payload, {"responseData": {"a": 1}, "deviceInfo": {"platform": "iPad"}, "offline": False})


@override_settings(ECS_API_BASE_URL="https://ecs.example.com/", ECS_API_TOKEN="tok-123", ECS_API_TIMEOUT=12)
class DeliveryClientTests(SimpleTestCase):
    def test_defaults_from_settings(self):
        session = _session()
        DeliveryClient(session=session).complete(_entry())
        args, kwargs = session.post.call_args
        self.assertEqual(args[0], "https://ecs.example.com/api/form-submissions/sub-1/complete")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer tok-123")
        self.assertEqual(kwargs["timeout"], 12)

    def test_no_authorization_without_token(self):
        session = _session()
        DeliveryClient(token="", session=session).complete(_entry())
        self.assertNotIn("Authorization", session.post.call_args.kwargs["headers"])

    def test_2xx_is_success(self):
        for status in (200, 201, 204):
            response = DeliveryClient(session=_session(status)).complete(_entry())
            self.assertEqual(response.status_code, status)

    def test_non_2xx_raises_with_status(self):
        for status in (302, 400, 404, 409, 500, 503):
            with self.assertRaises(DeliveryError) as cm:
                DeliveryClient(session=_session(status, "nope")).complete(_entry())
            self.assertEqual(cm.exception.status_code, status)

    def test_transport_errors_raise_without_status(self):
        for exc in (requests.ConnectionError("refused"), requests.Timeout("timed out")):
            session = MagicMock()
            session.post.side_effect = exc
            with self.assertRaises(DeliveryError) as cm:
                DeliveryClient(session=session).complete(_entry())
            self.assertIsNone(cm.exception.status_code)

    def test_complete_sends_queued_fields(self):
        session = _session()
        DeliveryClient(session=session).complete(_entry(gps=GPS, device_info={"online": False}))
        self.assertEqual(
            session.post.call_args.kwargs["json"],
            {"responseData": {"passOrFail": "Pass"}, "gps": GPS, "deviceInfo": {"online": False}, "offline": True},
        )
