from django.contrib import admin

from .models import QueuedSubmission, SubmissionAttempt


@admin.register(QueuedSubmission)
class QueuedSubmissionAdmin(admin.ModelAdmin):
    list_display = ("id", "submission_id", "retry_count", "queued_at")
    search_fields = ("id", "submission_id")
    readonly_fields = ("id", "submission_id", "response_data", "gps", "device_info", "queued_at", "retry_count")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(SubmissionAttempt)
class SubmissionAttemptAdmin(admin.ModelAdmin):
    list_display = ("id", "queued_id", "submission_id", "success", "response_status_code", "attempt_at")
    list_filter = ("success",)
    search_fields = ("queued_id", "submission_id")
    readonly_fields = (
        "queued_id", "submission_id", "success", "response_status_code",
        "error_message", "prior_retries", "attempt_at",
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
