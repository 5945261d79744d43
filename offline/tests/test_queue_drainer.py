"""Tests for draining the offline queue against a stubbed completion endpoint."""

from io import StringIO
from unittest.mock import MagicMock, patch

import requests
from django.core.management import call_command
from django.db import DatabaseError
from django.test import TestCase

from offline.exceptions import DeliveryError, StorageError
from offline.models import QueuedSubmission, SubmissionAttempt
from offline.services.delivery_client import DeliveryClient
from offline.services.queue_drainer import QueueDrainer
from offline.services.queue_manager import QueueManager
from offline.tasks import drain_queue_task


def _response(status_code):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = "" if status_code < 300 else "Internal Server Error"
    return resp


def _stub_session(*statuses_or_errors):
    """Session whose post() answers with the given statuses (or raises the given exceptions) in order."""
    session = MagicMock()
    session.post.side_effect = [
        item if isinstance(item, Exception) else _response(item) for item in statuses_or_errors
    ]
    return session


class StubClient:
    """Completion endpoint that rejects the listed submission ids."""

    def __init__(self, reject=()):
        self.reject = set(reject)
        self.delivered = []

    def complete(self, entry):
        if entry.submission_id in self.reject:
            raise DeliveryError("HTTP 500", status_code=500)
        self.delivered.append(entry.submission_id)
        return _response(200)


class QueueDrainerTests(TestCase):
    def setUp(self):
        self.manager = QueueManager()

    def _drainer(self, client):
        return QueueDrainer(manager=self.manager, client=client)

    def test_drain_empty_queue(self):
        self.assertEqual(self._drainer(StubClient()).drain(), {"synced": 0, "failed": 0})

    def test_drain_all_accepted(self):
        for i in range(4):
            self.manager.enqueue(f"sub-{i}", {"i": i})
        client = StubClient()
        result = self._drainer(client).drain()
        self.assertEqual(result, {"synced": 4, "failed": 0})
        self.assertEqual(self.manager.count(), 0)
        self.assertEqual(sorted(client.delivered), ["sub-0", "sub-1", "sub-2", "sub-3"])

    def test_drain_partial_failure(self):
        ids = {f"sub-{i}": self.manager.enqueue(f"sub-{i}", {}) for i in range(5)}
        result = self._drainer(StubClient(reject={"sub-1", "sub-3"})).drain()

        self.assertEqual(result, {"synced": 3, "failed": 2})
        remaining = {e.id: e for e in self.manager.get_all()}
        self.assertEqual(set(remaining), {ids["sub-1"], ids["sub-3"]})
        for entry in remaining.values():
            self.assertEqual(entry.retry_count, 1)

    def test_failure_does_not_stop_later_entries(self):
        self.manager.enqueue("sub-bad", {})
        self.manager.enqueue("sub-good", {})
        client = StubClient(reject={"sub-bad"})
        self._drainer(client).drain()
        self.assertEqual(client.delivered, ["sub-good"])

    def test_synced_entry_is_not_redelivered(self):
        self.manager.enqueue("sub-1", {})
        client = StubClient()
        self._drainer(client).drain()
        self.assertEqual(self._drainer(client).drain(), {"synced": 0, "failed": 0})
        self.assertEqual(client.delivered, ["sub-1"])

    def test_http_200_empties_queue(self):
        self.manager.enqueue("sub-1", {"passOrFail": "Pass"})
        self.assertEqual(self.manager.count(), 1)

        session = _stub_session(200)
        client = DeliveryClient(base_url="https://ecs.example.com", token="", timeout=5, session=session)
        result = self._drainer(client).drain()

        self.assertEqual(result, {"synced": 1, "failed": 0})
        self.assertEqual(self.manager.count(), 0)
        url = session.post.call_args.args[0]
        body = session.post.call_args.kwargs["json"]
        self.assertEqual(url, "https://ecs.example.com/api/form-submissions/sub-1/complete")
        self.assertEqual(body, {"responseData": {"passOrFail": "Pass"}, "offline": True})

    def test_http_500_then_200(self):
        first = self.manager.enqueue("sub-1", {})
        self.manager.enqueue("sub-2", {})

        session = MagicMock()
        session.post.side_effect = lambda url, **kwargs: _response(500 if "/sub-1/" in url else 200)
        client = DeliveryClient(base_url="https://ecs.example.com", session=session)
        result = self._drainer(client).drain()

        self.assertEqual(result, {"synced": 1, "failed": 1})
        self.assertEqual(self.manager.count(), 1)
        remaining = self.manager.get_all()[0]
        self.assertEqual(remaining.id, first)
        self.assertEqual(remaining.retry_count, 1)

    def test_repeated_drains_converge(self):
        self.manager.enqueue("sub-1", {})
        client = DeliveryClient(
            base_url="https://ecs.example.com",
            session=_stub_session(requests.ConnectionError("offline"), 200),
        )
        drainer = self._drainer(client)

        self.assertEqual(drainer.drain(), {"synced": 0, "failed": 1})
        self.assertEqual(self.manager.count(), 1)
        self.assertEqual(self.manager.get_all()[0].retry_count, 1)

        self.assertEqual(drainer.drain(), {"synced": 1, "failed": 0})
        self.assertEqual(self.manager.count(), 0)

    def test_timeout_counts_as_failure(self):
        self.manager.enqueue("sub-1", {})
        client = DeliveryClient(base_url="https://ecs.example.com", session=_stub_session(requests.Timeout("slow")))
        self.assertEqual(self._drainer(client).drain(), {"synced": 0, "failed": 1})

    def test_attempts_are_audited(self):
        self.manager.enqueue("sub-ok", {})
        self.manager.enqueue("sub-bad", {})
        self._drainer(StubClient(reject={"sub-bad"})).drain()

        ok = SubmissionAttempt.objects.get(submission_id="sub-ok")
        bad = SubmissionAttempt.objects.get(submission_id="sub-bad")
        self.assertTrue(ok.success)
        self.assertEqual(ok.response_status_code, 200)
        self.assertFalse(bad.success)
        self.assertEqual(bad.response_status_code, 500)
        self.assertIn("500", bad.error_message)
        self.assertEqual(bad.prior_retries, 0)

    def test_prior_retries_recorded_before_increment(self):
        queued_id = self.manager.enqueue("sub-bad", {})
        drainer = self._drainer(StubClient(reject={"sub-bad"}))
        drainer.drain()
        drainer.drain()

        attempts = SubmissionAttempt.objects.filter(queued_id=queued_id).order_by("id")
        self.assertEqual([a.prior_retries for a in attempts], [0, 1])
        self.assertEqual(QueuedSubmission.objects.get(pk=queued_id).retry_count, 2)

    @patch.object(SubmissionAttempt, "save", side_effect=DatabaseError("no such table: offline_submissionattempt"))
    def test_audit_failure_does_not_stop_drain(self, _mock_save):
        bad = self.manager.enqueue("sub-bad", {})
        self.manager.enqueue("sub-good", {})
        client = StubClient(reject={"sub-bad"})

        with self.assertLogs("offline", level="ERROR"):
            result = self._drainer(client).drain()

        self.assertEqual(result, {"synced": 1, "failed": 1})
        self.assertEqual(client.delivered, ["sub-good"])
        remaining = self.manager.get_all()
        self.assertEqual([e.id for e in remaining], [bad])
        self.assertEqual(remaining[0].retry_count, 1)

    def test_storage_error_propagates(self):
        self.manager.enqueue("sub-1", {})
        with patch.object(self.manager, "get_all", side_effect=StorageError("corrupt")):
            with self.assertRaises(StorageError):
                self._drainer(StubClient()).drain()


class DrainEntryPointTests(TestCase):
    @patch("offline.tasks.QueueDrainer")
    def test_drain_queue_task(self, mock_drainer_cls):
        mock_drainer_cls.return_value.drain.return_value = {"synced": 2, "failed": 1}
        self.assertEqual(drain_queue_task(), {"success": True, "synced": 2, "failed": 1})

    @patch("offline.tasks.QueueDrainer")
    def test_drain_queue_task_storage_error(self, mock_drainer_cls):
        mock_drainer_cls.return_value.drain.side_effect = StorageError("disk full")
        result = drain_queue_task()
        self.assertFalse(result["success"])
        self.assertIn("disk full", result["error"])

    @patch("offline.management.commands.drain_offline_queue.QueueDrainer")
    def test_management_command_reports_summary(self, mock_drainer_cls):
        mock_drainer_cls.return_value.drain.return_value = {"synced": 3, "failed": 0}
        out = StringIO()
        call_command("drain_offline_queue", stdout=out)
        self.assertIn("Synced: 3, Failed: 0", out.getvalue())

    def test_management_command_status(self):
        QueueManager().enqueue("sub-9", {})
        out = StringIO()
        call_command("drain_offline_queue", "--status", stdout=out)
        self.assertIn("1 pending submission(s).", out.getvalue())
        self.assertIn("submission=sub-9", out.getvalue())
        self.assertEqual(QueuedSubmission.objects.count(), 1)
