# Offline submission queue and delivery audit log

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="QueuedSubmission",
            fields=[
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("submission_id", models.CharField(db_index=True, max_length=64)),
                ("response_data", models.JSONField(default=dict)),
                ("gps", models.JSONField(blank=True, null=True)),
                ("device_info", models.JSONField(blank=True, null=True)),
                ("queued_at", models.BigIntegerField(help_text="Epoch milliseconds, set once at enqueue.")),
                ("retry_count", models.PositiveIntegerField(default=0)),
            ],
            options={
                "verbose_name": "Queued Submission",
                "verbose_name_plural": "Queued Submissions",
                "ordering": ["queued_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="SubmissionAttempt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("queued_id", models.CharField(db_index=True, max_length=64)),
                ("submission_id", models.CharField(db_index=True, max_length=64)),
                ("success", models.BooleanField(default=False)),
                ("response_status_code", models.IntegerField(blank=True, null=True)),
                ("error_message", models.TextField(blank=True)),
                ("prior_retries", models.PositiveIntegerField(default=0, help_text="Failed attempts before this one.")),
                ("attempt_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Submission Attempt",
                "verbose_name_plural": "Submission Attempts",
                "ordering": ["-attempt_at"],
            },
        ),
    ]
