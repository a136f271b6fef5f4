from django.contrib import admin

from .models import AdminAction, Participant, Registration, Tournament


@admin.register(Tournament)
class TournamentAdmin(admin.ModelAdmin):
    list_display = (
        "game",
        "mode",
        "entry_fee_rs",
        "prize_winner_rs",
        "prize_runner_rs",
        "prize_per_kill_rs",
        "max_capacity",
        "is_active",
    )
    list_filter = ("game", "mode", "is_active")
    ordering = ("game", "id")


class ParticipantInline(admin.TabularInline):
    model = Participant
    extra = 0
    can_delete = False
    readonly_fields = ("slot_position", "player_name", "player_game_id", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    """
    Read-only view of the ledger; approvals go through the API so every
    decision is locked, audited and announced to observers.
    """

    list_display = ("id", "tournament", "team_name", "leader_name", "transaction_id", "status", "created_at")
    list_filter = ("status", "tournament__game", "tournament__mode")
    search_fields = ("team_name", "leader_name", "leader_game_id", "transaction_id", "participants__player_game_id")
    inlines = [ParticipantInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AdminAction)
class AdminActionAdmin(admin.ModelAdmin):
    list_display = ("registration", "admin_user", "action", "reason", "created_at")
    list_filter = ("action",)
    search_fields = ("registration__transaction_id", "admin_user__username")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
