from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Tournament",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("game", models.CharField(choices=[("bgmi", "BGMI"), ("freefire", "Free Fire")], max_length=20)),
                (
                    "mode",
                    models.CharField(choices=[("solo", "Solo"), ("duo", "Duo"), ("squad", "Squad")], max_length=10),
                ),
                ("entry_fee_rs", models.PositiveIntegerField()),
                ("prize_winner_rs", models.PositiveIntegerField()),
                ("prize_runner_rs", models.PositiveIntegerField()),
                ("prize_per_kill_rs", models.PositiveIntegerField()),
                ("max_capacity", models.PositiveIntegerField(help_text="Maximum number of registrations")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "tournaments",
                "ordering": ["game", "id"],
                "constraints": [
                    models.UniqueConstraint(fields=("game", "mode"), name="unique_tournament_game_mode"),
                    models.CheckConstraint(
                        condition=models.Q(max_capacity__gt=0), name="tournament_capacity_positive"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Registration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")],
                        default="pending",
                        max_length=10,
                    ),
                ),
                ("team_name", models.CharField(blank=True, max_length=100, null=True)),
                ("leader_name", models.CharField(max_length=100)),
                ("leader_game_id", models.CharField(max_length=50)),
                ("leader_whatsapp", models.CharField(max_length=15)),
                ("transaction_id", models.CharField(max_length=100)),
                ("payment_screenshot_url", models.URLField(blank=True, max_length=500, null=True)),
                ("rejection_reason", models.TextField(blank=True, null=True)),
                ("idempotency_key", models.CharField(blank=True, max_length=64, null=True, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "tournament",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="registrations",
                        to="tournaments.tournament",
                    ),
                ),
            ],
            options={
                "db_table": "registrations",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tournament", "status"], name="idx_registrations_tournament"),
                    models.Index(fields=["created_at"], name="idx_registrations_created_at"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Participant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("player_name", models.CharField(max_length=100)),
                ("player_game_id", models.CharField(max_length=50)),
                ("slot_position", models.PositiveSmallIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "registration",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participants",
                        to="tournaments.registration",
                    ),
                ),
            ],
            options={
                "db_table": "participants",
                "ordering": ["registration", "slot_position"],
                "constraints": [
                    models.UniqueConstraint(fields=("registration", "slot_position"), name="unique_participant_slot"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AdminAction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "action",
                    models.CharField(
                        choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")],
                        max_length=10,
                    ),
                ),
                ("reason", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "admin_user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="registration_actions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "registration",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="admin_actions",
                        to="tournaments.registration",
                    ),
                ),
            ],
            options={
                "db_table": "admin_actions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["created_at"], name="idx_admin_actions_created_at"),
                ],
            },
        ),
    ]
