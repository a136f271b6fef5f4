import logging

from django.core.cache import cache
from django.db.models import Count

from rest_framework import generics, permissions, status
from rest_framework.response import Response

from accounts.permissions import IsAdminRole

from . import services
from .models import AdminAction, Tournament
from .notifications import get_change_version
from .serializers import (
    AdminActionSerializer,
    RegistrationCreateSerializer,
    RegistrationSerializer,
    StatusUpdateSerializer,
    TournamentSerializer,
)
from .signals import TOURNAMENT_LIST_CACHE_KEY

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "full": status.HTTP_409_CONFLICT,
    "unauthorized": status.HTTP_403_FORBIDDEN,
    "validation": status.HTTP_400_BAD_REQUEST,
    "invalid_transition": status.HTTP_400_BAD_REQUEST,
    "storage": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def result_response(result, success_status=status.HTTP_200_OK):
    """Render a service result dict with the matching HTTP status"""
    if result.get("success"):
        return Response(result, status=success_status)
    return Response(result, status=ERROR_STATUS_CODES.get(result.get("error"), status.HTTP_500_INTERNAL_SERVER_ERROR))


def annotated_tournaments():
    return Tournament.objects.annotate(
        filled=Count("registrations", filter=services.filled_filter("registrations__"))
    )


# ============= Tournament Views =============


class TournamentListView(generics.ListAPIView):
    """
    List active tournaments with slot counts (cached)
    GET /api/tournaments/
    Cache is cleared whenever a registration or tournament changes
    """

    serializer_class = TournamentSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = None

    def get_queryset(self):
        return annotated_tournaments().filter(is_active=True)

    def list(self, request, *args, **kwargs):
        cached_data = cache.get(TOURNAMENT_LIST_CACHE_KEY)
        if cached_data is not None:
            return Response(cached_data)

        serializer = self.get_serializer(self.get_queryset(), many=True)
        cache.set(TOURNAMENT_LIST_CACHE_KEY, serializer.data, timeout=300)  # 5 minutes
        return Response(serializer.data)


class TournamentDetailView(generics.RetrieveAPIView):
    """
    Get tournament details with slot counts
    GET /api/tournaments/<id>/
    """

    serializer_class = TournamentSerializer
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        return annotated_tournaments()


class SlotAvailabilityView(generics.GenericAPIView):
    """
    Live slot availability, computed from the ledger on every call
    GET /api/tournaments/<tournament_id>/slots/
    ``version`` changes whenever the tournament's registrations change.
    """

    permission_classes = [permissions.AllowAny]

    def get(self, request, tournament_id):
        result = services.get_slot_availability(tournament_id)
        if result.get("success"):
            result["version"] = get_change_version(tournament_id)
        return result_response(result)


class TournamentStatsView(generics.GenericAPIView):
    """
    Registration counts by status (admin dashboard)
    GET /api/tournaments/<tournament_id>/stats/
    """

    permission_classes = [IsAdminRole]

    def get(self, request, tournament_id):
        return result_response(services.get_tournament_stats(tournament_id))


class DashboardStatsView(generics.GenericAPIView):
    """
    Summary across all active tournaments (admin dashboard)
    GET /api/tournaments/stats/
    """

    permission_classes = [IsAdminRole]

    def get(self, request):
        return result_response(services.get_dashboard_stats())


# ============= Registration Views =============


class TournamentRegistrationCreateView(generics.GenericAPIView):
    """
    Register a player or team for a tournament
    POST /api/tournaments/<tournament_id>/register/
    Body: {
        "team_name": "Team Name",            # duo / squad only
        "leader_name": "", "leader_game_id": "", "leader_whatsapp": "",
        "transaction_id": "", "payment_screenshot_url": "",
        "participants": [{"player_name": "", "player_game_id": ""}],
        "idempotency_key": ""                # optional, makes retries safe
    }
    """

    serializer_class = RegistrationCreateSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request, tournament_id):
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"success": False, "error": "validation", "message": "Invalid registration data",
                 "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        data = serializer.validated_data
        result = services.register_for_tournament(
            tournament_id,
            leader_name=data["leader_name"],
            leader_game_id=data["leader_game_id"],
            leader_whatsapp=data["leader_whatsapp"],
            transaction_id=data["transaction_id"],
            participants=[dict(member) for member in data["participants"]],
            team_name=data.get("team_name"),
            payment_proof_locator=data.get("payment_screenshot_url"),
            idempotency_key=data.get("idempotency_key"),
        )
        created = result.get("success") and not result.get("duplicate")
        return result_response(result, success_status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)


class RegistrationLookupView(generics.GenericAPIView):
    """
    Check registration status by payment transaction ID
    GET /api/tournaments/registrations/lookup/?transaction_id=<id>
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        return result_response(services.lookup_registration(request.query_params.get("transaction_id")))


class RegistrationListView(generics.ListAPIView):
    """
    All registrations with rosters (admin panel)
    GET /api/tournaments/registrations/?tournament=<id>&status=<status>
    """

    serializer_class = RegistrationSerializer
    permission_classes = [IsAdminRole]

    def get_queryset(self):
        return services.list_registrations(
            tournament_id=self.request.query_params.get("tournament"),
            status=self.request.query_params.get("status"),
        )


class RegistrationStatusUpdateView(generics.GenericAPIView):
    """
    Approve or reject a pending registration
    POST /api/tournaments/registrations/<registration_id>/status/
    Body: {"status": "approved" | "rejected", "reason": "..."}
    Admin rights are checked by the service, not by a permission class, so
    the same check applies to every caller.
    """

    serializer_class = StatusUpdateSerializer
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, registration_id):
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"success": False, "error": "validation", "message": "Invalid status update",
                 "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        result = services.update_registration_status(
            registration_id,
            serializer.validated_data["status"],
            admin_id=request.user.id,
            reason=serializer.validated_data.get("reason"),
        )
        return result_response(result)


class RegistrationActionsView(generics.ListAPIView):
    """
    Audit trail of admin decisions on a registration
    GET /api/tournaments/registrations/<registration_id>/actions/
    """

    serializer_class = AdminActionSerializer
    permission_classes = [IsAdminRole]
    pagination_class = None

    def get_queryset(self):
        return AdminAction.objects.filter(registration_id=self.kwargs["registration_id"]).select_related("admin_user")
