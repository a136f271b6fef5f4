import json

from django.core.management.base import BaseCommand, CommandError

from tournaments.models import Tournament
from tournaments.notifications import ALL, SlotWatcher


class Command(BaseCommand):
    help = "Print slot availability whenever a tournament's registrations change"

    def add_arguments(self, parser):
        parser.add_argument("tournament", help="Tournament ID, or 'all'")
        parser.add_argument("--poll-interval", type=float, default=None, help="Fallback polling period (seconds)")

    def handle(self, *args, **options):
        target = options["tournament"]
        if target != ALL:
            if not target.isdigit() or not Tournament.objects.filter(id=int(target)).exists():
                raise CommandError(f"Tournament {target} not found")
            target = int(target)

        watcher = SlotWatcher(target, self.print_update, poll_interval=options["poll_interval"])
        try:
            watcher.run()
        except KeyboardInterrupt:
            watcher.stop()
            self.stdout.write("Stopped")

    def print_update(self, result, event):
        trigger = f"{event.table}:{event.action}" if event else "poll"
        self.stdout.write(f"[{trigger}] {json.dumps(result)}")
