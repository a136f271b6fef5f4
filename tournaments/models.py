from django.conf import settings
from django.db import models


class Tournament(models.Model):
    """
    One game/mode combination with a fixed number of slots
    """

    GAME_CHOICES = (
        ("bgmi", "BGMI"),
        ("freefire", "Free Fire"),
    )

    MODE_CHOICES = (
        ("solo", "Solo"),
        ("duo", "Duo"),
        ("squad", "Squad"),
    )

    game = models.CharField(max_length=20, choices=GAME_CHOICES)
    mode = models.CharField(max_length=10, choices=MODE_CHOICES)

    # Fees and prizes in rupees
    entry_fee_rs = models.PositiveIntegerField()
    prize_winner_rs = models.PositiveIntegerField()
    prize_runner_rs = models.PositiveIntegerField()
    prize_per_kill_rs = models.PositiveIntegerField()

    # Slots (teams for duo/squad, players for solo)
    max_capacity = models.PositiveIntegerField(help_text="Maximum number of registrations")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.get_game_display()} {self.get_mode_display()}"

    @property
    def slug(self):
        return f"{self.game}-{self.mode}"

    class Meta:
        db_table = "tournaments"
        ordering = ["game", "id"]
        constraints = [
            models.UniqueConstraint(fields=["game", "mode"], name="unique_tournament_game_mode"),
            models.CheckConstraint(condition=models.Q(max_capacity__gt=0), name="tournament_capacity_positive"),
        ]


class Registration(models.Model):
    """
    One admission into a tournament, a solo player or a whole team
    """

    STATUS_CHOICES = (
        ("pending", "Pending"),
        ("approved", "Approved"),
        ("rejected", "Rejected"),
    )

    tournament = models.ForeignKey(Tournament, on_delete=models.PROTECT, related_name="registrations")
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="pending")

    # Team / leader details (team_name is empty for solo)
    team_name = models.CharField(max_length=100, blank=True, null=True)
    leader_name = models.CharField(max_length=100)
    leader_game_id = models.CharField(max_length=50)
    leader_whatsapp = models.CharField(max_length=15)

    # Payment proof, verified by hand from the screenshot
    transaction_id = models.CharField(max_length=100)
    payment_screenshot_url = models.URLField(max_length=500, blank=True, null=True)

    rejection_reason = models.TextField(blank=True, null=True)

    # Client-supplied token so a retried submission does not take a second slot
    idempotency_key = models.CharField(max_length=64, unique=True, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.team_name or self.leader_name} - {self.tournament}"

    class Meta:
        db_table = "registrations"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tournament", "status"], name="idx_registrations_tournament"),
            models.Index(fields=["created_at"], name="idx_registrations_created_at"),
        ]


class Participant(models.Model):
    """
    Roster member of a registration; slot 1 is the leader
    """

    registration = models.ForeignKey(Registration, on_delete=models.CASCADE, related_name="participants")
    player_name = models.CharField(max_length=100)
    player_game_id = models.CharField(max_length=50)
    slot_position = models.PositiveSmallIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.player_name} (slot {self.slot_position})"

    class Meta:
        db_table = "participants"
        ordering = ["registration", "slot_position"]
        constraints = [
            models.UniqueConstraint(fields=["registration", "slot_position"], name="unique_participant_slot"),
        ]


class AdminAction(models.Model):
    """
    Audit record of an approval or rejection
    """

    registration = models.ForeignKey(Registration, on_delete=models.PROTECT, related_name="admin_actions")
    admin_user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="registration_actions"
    )
    action = models.CharField(max_length=10, choices=Registration.STATUS_CHOICES)
    reason = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.admin_user} {self.action} registration {self.registration_id}"

    class Meta:
        db_table = "admin_actions"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["created_at"], name="idx_admin_actions_created_at"),
        ]
