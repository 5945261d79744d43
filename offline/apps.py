from django.apps import AppConfig
from django.conf import settings


class OfflineConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "offline"
    verbose_name = "Offline submission queue"
    auto_sync = None

    def ready(self):
        """
        Connect auto-sync receivers once per process. No probe and no drain here:
        the startup drain runs from the Celery worker_ready hook in offline.tasks.
        """
        if not getattr(settings, "OFFLINE_AUTO_SYNC", False) or self.auto_sync is not None:
            return
        from offline.services.auto_sync import AutoSync
        from offline.tasks import schedule_drain

        self.auto_sync = AutoSync()
        self.auto_sync.start(schedule_drain, drain_now=False)
