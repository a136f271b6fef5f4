from django.core.management.base import BaseCommand

from tournaments.catalog import seed_catalog
from tournaments.models import Tournament


class Command(BaseCommand):
    help = "Create the six default BGMI / Free Fire tournaments (existing ones are left as they are)"

    def handle(self, *args, **options):
        created = seed_catalog()

        for tournament in created:
            self.stdout.write(self.style.SUCCESS(f"Created {tournament.slug} ({tournament.max_capacity} slots)"))

        self.stdout.write(f"{len(created)} created, {Tournament.objects.count()} tournaments in catalog")
