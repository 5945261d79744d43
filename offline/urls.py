"""Offline app URLs."""

from django.urls import path

from . import views

urlpatterns = [
    path("submissions/<str:submission_id>/complete/", views.submit_completion, name="offline_submit_completion"),
    path("status/", views.queue_status, name="offline_queue_status"),
    path("retry/", views.retry_submit, name="offline_retry_submit"),
    path("resume/", views.app_resumed, name="offline_app_resumed"),
]
