"""Celery app for the ECS Connect offline sync worker."""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ecs_project.settings")

app = Celery("ecs_project")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
