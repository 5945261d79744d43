"""
Management command: Drain the offline submission queue once.
Use --status to only report what is pending.
"""

from django.core.management.base import BaseCommand, CommandError

from offline.exceptions import StorageError
from offline.services.queue_drainer import QueueDrainer
from offline.services.queue_manager import QueueManager


class Command(BaseCommand):
    help = "Deliver every queued offline submission to the ECS Connect API once."

    def add_arguments(self, parser):
        parser.add_argument(
            "--status",
            action="store_true",
            help="Only list pending submissions; do not deliver.",
        )

    def handle(self, *args, **options):
        manager = QueueManager()
        try:
            if options["status"]:
                entries = manager.get_all()
                self.stdout.write(f"{len(entries)} pending submission(s).")
                for e in entries:
                    self.stdout.write(f"  {e.id} submission={e.submission_id} retries={e.retry_count}")
                return
            result = QueueDrainer(manager=manager).drain()
        except StorageError as e:
            raise CommandError(str(e)) from e

        style = self.style.SUCCESS if result["failed"] == 0 else self.style.WARNING
        self.stdout.write(style(f"Synced: {result['synced']}, Failed: {result['failed']}"))
