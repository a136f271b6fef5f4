from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from accounts.models import UserRole


class Command(BaseCommand):
    help = "Grant the admin role to an existing user"

    def add_arguments(self, parser):
        parser.add_argument("username", help="Username of the account to promote")
        parser.add_argument("--revoke", action="store_true", help="Remove the admin role instead")

    def handle(self, *args, **options):
        User = get_user_model()
        try:
            user = User.objects.get(username=options["username"])
        except User.DoesNotExist:
            raise CommandError(f"User {options['username']} not found")

        if options["revoke"]:
            deleted, _ = UserRole.objects.filter(user=user, role="admin").delete()
            self.stdout.write(self.style.SUCCESS(f"Revoked admin role from {user.username} ({deleted} removed)"))
            return

        _, created = UserRole.objects.get_or_create(user=user, role="admin")
        if created:
            self.stdout.write(self.style.SUCCESS(f"Granted admin role to {user.username}"))
        else:
            self.stdout.write(f"{user.username} is already an admin")
