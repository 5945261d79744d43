"""Offline submission queue models."""

from django.db import models


class QueuedSubmission(models.Model):
    """Form completion saved locally until the ECS Connect API confirms it."""

    id = models.CharField(max_length=64, primary_key=True)
    submission_id = models.CharField(max_length=64, db_index=True)
    response_data = models.JSONField(default=dict)
    gps = models.JSONField(null=True, blank=True)
    device_info = models.JSONField(null=True, blank=True)
    queued_at = models.BigIntegerField(help_text="Epoch milliseconds, set once at enqueue.")
    retry_count = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = "Queued Submission"
        verbose_name_plural = "Queued Submissions"
        ordering = ["queued_at", "id"]

    def __str__(self):
        return f"{self.id} -> {self.submission_id}"


class SubmissionAttempt(models.Model):
    """Audit log for every delivery attempt. Outlives the queue entry."""

    queued_id = models.CharField(max_length=64, db_index=True)
    submission_id = models.CharField(max_length=64, db_index=True)
    success = models.BooleanField(default=False)
    response_status_code = models.IntegerField(null=True, blank=True)
    error_message = models.TextField(blank=True)
    prior_retries = models.PositiveIntegerField(default=0, help_text="Failed attempts before this one.")
    attempt_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Submission Attempt"
        verbose_name_plural = "Submission Attempts"
        ordering = ["-attempt_at"]
