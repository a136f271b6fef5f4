from django.core.validators import RegexValidator

from rest_framework import serializers

from .models import AdminAction, Participant, Registration, Tournament

name_validator = RegexValidator(
    r"^[A-Za-z\s.'-]+$", "Name can only contain letters, spaces, dots, apostrophes and hyphens"
)
game_id_validator = RegexValidator(
    r"^[A-Za-z0-9_.-]+$", "Game ID can only contain letters, numbers, dots, hyphens, and underscores"
)
whatsapp_validator = RegexValidator(
    r"^[6-9]\d{9}$", "Please enter a valid 10-digit Indian mobile number starting with 6, 7, 8, or 9"
)
transaction_id_validator = RegexValidator(
    r"^[A-Za-z0-9]+$", "Transaction ID can only contain letters and numbers"
)
team_name_validator = RegexValidator(
    r"^[A-Za-z0-9\s._-]+$", "Team name can contain letters, numbers, spaces, dots, underscores, and hyphens"
)


class TournamentSerializer(serializers.ModelSerializer):
    """Tournament with live slot counts (expects a ``filled`` annotation)"""

    slug = serializers.CharField(read_only=True)
    filled = serializers.IntegerField(read_only=True)
    remaining = serializers.SerializerMethodField()

    class Meta:
        model = Tournament
        fields = (
            "id",
            "slug",
            "game",
            "mode",
            "entry_fee_rs",
            "prize_winner_rs",
            "prize_runner_rs",
            "prize_per_kill_rs",
            "max_capacity",
            "filled",
            "remaining",
            "is_active",
        )

    def get_remaining(self, obj):
        return max(obj.max_capacity - obj.filled, 0)


class ParticipantInputSerializer(serializers.Serializer):
    player_name = serializers.CharField(min_length=2, max_length=50, validators=[name_validator])
    player_game_id = serializers.CharField(min_length=3, max_length=20, validators=[game_id_validator])


class RegistrationCreateSerializer(serializers.Serializer):
    """
    Registration form payload. Field rules only; roster size and capacity
    are checked by the admission service.
    """

    team_name = serializers.CharField(
        min_length=3, max_length=30, validators=[team_name_validator], required=False, allow_null=True
    )
    leader_name = serializers.CharField(min_length=2, max_length=50, validators=[name_validator])
    leader_game_id = serializers.CharField(min_length=3, max_length=20, validators=[game_id_validator])
    leader_whatsapp = serializers.CharField(validators=[whatsapp_validator])
    transaction_id = serializers.CharField(min_length=5, max_length=50, validators=[transaction_id_validator])
    payment_screenshot_url = serializers.URLField(max_length=500, required=False, allow_null=True)
    participants = ParticipantInputSerializer(many=True, required=False, default=list)
    idempotency_key = serializers.CharField(max_length=64, required=False, allow_null=True)


class ParticipantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Participant
        fields = ("slot_position", "player_name", "player_game_id")


class RegistrationSerializer(serializers.ModelSerializer):
    """Full registration for the admin panel"""

    tournament_slug = serializers.CharField(source="tournament.slug", read_only=True)
    participants = ParticipantSerializer(many=True, read_only=True)

    class Meta:
        model = Registration
        fields = (
            "id",
            "tournament",
            "tournament_slug",
            "status",
            "team_name",
            "leader_name",
            "leader_game_id",
            "leader_whatsapp",
            "transaction_id",
            "payment_screenshot_url",
            "rejection_reason",
            "participants",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=("approved", "rejected"))
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=500)


class AdminActionSerializer(serializers.ModelSerializer):
    admin_username = serializers.CharField(source="admin_user.username", read_only=True)

    class Meta:
        model = AdminAction
        fields = ("id", "registration", "admin_username", "action", "reason", "created_at")
        read_only_fields = fields
