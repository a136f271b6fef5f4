"""
Service layer for the registration ledger.

Slot accounting, the admission transaction and admin status transitions.
Filled slots are always counted from the ledger (pending + approved
registrations); nothing stores a running counter.

Every public function returns a dict with a ``success`` flag. Failures carry
an ``error`` code (see ``tournaments.exceptions``) and a ``message`` that can
be shown to the user as is.
"""
import functools
import logging
from collections.abc import Iterable, Mapping

from django.db import DatabaseError, transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from accounts.permissions import has_admin_role

from .catalog import roster_size
from .exceptions import (
    CapacityExceeded,
    InvalidTransition,
    NotFound,
    RegistrationError,
    StorageFailure,
    Unauthorized,
    ValidationFailure,
)
from .models import AdminAction, Participant, Registration, Tournament

logger = logging.getLogger(__name__)

# Registrations in these states hold a slot; rejecting one frees it
SLOT_HOLDING_STATUSES = ("pending", "approved")
DECISION_STATUSES = ("approved", "rejected")


def service_result(func):
    """Turn raised RegistrationErrors and database errors into failure dicts"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RegistrationError as e:
            return e.as_result()
        except DatabaseError:
            logger.exception(f"Storage failure in {func.__name__}")
            return StorageFailure().as_result()

    return wrapper


def filled_filter(prefix=""):
    return Q(**{f"{prefix}status__in": SLOT_HOLDING_STATUSES})


def count_filled(tournament_id):
    return Registration.objects.filter(filled_filter(), tournament_id=tournament_id).count()


def _remaining(capacity, filled):
    return max(capacity - filled, 0)


def _get_tournament(queryset, tournament_id, message="Tournament not found"):
    try:
        return queryset.get(id=tournament_id)
    except (Tournament.DoesNotExist, ValueError, TypeError):
        raise NotFound(message)


# ============= Capacity Accounting =============


@service_result
def get_slot_availability(tournament_id):
    """
    Capacity, filled and remaining slots for one active tournament.

    Read-only; safe to poll. ``remaining`` never goes below zero. Inactive
    tournaments are reported as not found.
    """
    tournament = _get_tournament(
        Tournament.objects.filter(is_active=True).annotate(
            filled=Count("registrations", filter=filled_filter("registrations__"))
        ),
        tournament_id,
    )
    return {
        "success": True,
        "capacity": tournament.max_capacity,
        "filled": tournament.filled,
        "remaining": _remaining(tournament.max_capacity, tournament.filled),
    }


@service_result
def get_all_slot_availability(active_only=True):
    """Availability for every tournament in one query"""
    queryset = Tournament.objects.annotate(filled=Count("registrations", filter=filled_filter("registrations__")))
    if active_only:
        queryset = queryset.filter(is_active=True)

    tournaments = [
        {
            "tournament_id": tournament.id,
            "slug": tournament.slug,
            "game": tournament.game,
            "mode": tournament.mode,
            "capacity": tournament.max_capacity,
            "filled": tournament.filled,
            "remaining": _remaining(tournament.max_capacity, tournament.filled),
        }
        for tournament in queryset
    ]
    return {"success": True, "tournaments": tournaments}


@service_result
def get_tournament_stats(tournament_id):
    """Registration counts by status plus remaining slots, for the admin dashboard"""
    tournament = _get_tournament(Tournament.objects.all(), tournament_id)

    counts = Registration.objects.filter(tournament=tournament).aggregate(
        total=Count("id"),
        pending=Count("id", filter=Q(status="pending")),
        approved=Count("id", filter=Q(status="approved")),
        rejected=Count("id", filter=Q(status="rejected")),
    )
    filled = counts["pending"] + counts["approved"]

    return {
        "success": True,
        "tournament_id": tournament.id,
        "total_registrations": counts["total"],
        "pending_count": counts["pending"],
        "approved_count": counts["approved"],
        "rejected_count": counts["rejected"],
        "capacity": tournament.max_capacity,
        "filled": filled,
        "remaining_slots": _remaining(tournament.max_capacity, filled),
    }


@service_result
def get_dashboard_stats():
    """
    Admin dashboard summary across every active tournament.

    ``approved_today`` / ``rejected_today`` count decisions recorded since
    local midnight; ``total_revenue_rs`` is the entry fee of every approved
    registration.
    """
    start_of_day = timezone.localtime().replace(hour=0, minute=0, second=0, microsecond=0)

    tournaments = Tournament.objects.filter(is_active=True).annotate(
        pending=Count("registrations", filter=Q(registrations__status="pending")),
        approved=Count("registrations", filter=Q(registrations__status="approved")),
        rejected=Count("registrations", filter=Q(registrations__status="rejected")),
    )
    rows = []
    for tournament in tournaments:
        filled = tournament.pending + tournament.approved
        rows.append(
            {
                "tournament_id": tournament.id,
                "slug": tournament.slug,
                "game": tournament.game,
                "mode": tournament.mode,
                "capacity": tournament.max_capacity,
                "pending_count": tournament.pending,
                "approved_count": tournament.approved,
                "rejected_count": tournament.rejected,
                "filled": filled,
                "remaining_slots": _remaining(tournament.max_capacity, filled),
                "is_full": filled >= tournament.max_capacity,
            }
        )

    totals = Registration.objects.filter(tournament__is_active=True).aggregate(
        total=Count("id"),
        pending=Count("id", filter=Q(status="pending")),
        revenue=Sum("tournament__entry_fee_rs", filter=Q(status="approved")),
    )
    decisions = AdminAction.objects.filter(
        created_at__gte=start_of_day, registration__tournament__is_active=True
    ).aggregate(
        approved=Count("id", filter=Q(action="approved")),
        rejected=Count("id", filter=Q(action="rejected")),
    )

    return {
        "success": True,
        "total_registrations": totals["total"],
        "pending_approvals": totals["pending"],
        "approved_today": decisions["approved"],
        "rejected_today": decisions["rejected"],
        "total_revenue_rs": totals["revenue"] or 0,
        "tournaments": rows,
    }


# ============= Admission =============


def _clean(value):
    return value.strip() if isinstance(value, str) else value


def _validate_leader(fields):
    errors = {name: "This field is required." for name, value in fields.items() if not value}
    if errors:
        raise ValidationFailure("Missing required registration details", details=errors)


def _build_roster(mode, leader_name, leader_game_id, participants):
    """
    Leader plus teammates as participant dicts, in slot order.

    Raises ValidationFailure when the roster does not match the mode.
    """
    expected = roster_size(mode)
    roster = [{"player_name": leader_name, "player_game_id": leader_game_id}]

    if participants is None:
        participants = []
    elif isinstance(participants, (str, bytes, Mapping)) or not isinstance(participants, Iterable):
        raise ValidationFailure("Participants must be a list of players", details={"participants": "Expected a list"})

    for index, member in enumerate(participants, start=2):
        if not isinstance(member, Mapping):
            raise ValidationFailure(
                f"Player {index} is malformed",
                details={"participants": f"Player {index} must have a name and a game ID"},
            )
        name = _clean(member.get("player_name"))
        game_id = _clean(member.get("player_game_id"))
        if not name or not game_id:
            raise ValidationFailure(
                f"Player {index} needs a name and a game ID",
                details={"participants": f"Player {index} is incomplete"},
            )
        roster.append({"player_name": name, "player_game_id": game_id})

    if len(roster) != expected:
        raise ValidationFailure(
            f"{mode.title()} registrations need exactly {expected} player(s), got {len(roster)}",
            details={"participants": f"Expected {expected - 1} teammate(s)"},
        )

    game_ids = [member["player_game_id"] for member in roster]
    if len(set(game_ids)) != len(game_ids):
        raise ValidationFailure(
            "Game IDs must be different for each player",
            details={"participants": "Duplicate game ID in roster"},
        )

    return roster


@service_result
def register_for_tournament(
    tournament_id,
    leader_name,
    leader_game_id,
    leader_whatsapp,
    transaction_id,
    participants=(),
    team_name=None,
    payment_proof_locator=None,
    idempotency_key=None,
):
    """
    Admit a registration if the tournament still has a free slot.

    The tournament row stays locked from the filled-count read until the
    registration and its participants are inserted, so two requests racing
    for the last slot cannot both succeed. Different tournaments never wait
    on each other.

    Args:
        participants: teammates in slot order (empty for solo), each a dict
            with ``player_name`` and ``player_game_id``. The leader is always
            slot 1.
        idempotency_key: optional client token; a repeat submission with the
            same key returns the original registration instead of taking
            another slot.

    Returns:
        {"success": True, "registration_id", "slots_remaining"} or a failure
        dict with error ``not_found``, ``full``, ``validation`` or ``storage``.
    """
    leader_name = _clean(leader_name)
    leader_game_id = _clean(leader_game_id)
    leader_whatsapp = _clean(leader_whatsapp)
    transaction_id = _clean(transaction_id)
    team_name = _clean(team_name) or None
    idempotency_key = _clean(idempotency_key) or None

    _validate_leader(
        {
            "leader_name": leader_name,
            "leader_game_id": leader_game_id,
            "leader_whatsapp": leader_whatsapp,
            "transaction_id": transaction_id,
        }
    )

    with transaction.atomic():
        tournament = _get_tournament(
            Tournament.objects.select_for_update().filter(is_active=True),
            tournament_id,
            message="Tournament not found or not active",
        )

        if idempotency_key:
            existing = Registration.objects.filter(idempotency_key=idempotency_key).first()
            if existing is not None:
                if existing.tournament_id != tournament.id:
                    raise ValidationFailure(
                        "This submission was already used for another tournament",
                        details={"idempotency_key": "Already used"},
                    )
                logger.info(f"Duplicate submission {idempotency_key} for registration {existing.id}")
                return {
                    "success": True,
                    "registration_id": existing.id,
                    "slots_remaining": _remaining(tournament.max_capacity, count_filled(tournament.id)),
                    "duplicate": True,
                }

        roster = _build_roster(tournament.mode, leader_name, leader_game_id, participants)

        if tournament.mode == "solo":
            team_name = None
        elif not team_name:
            raise ValidationFailure("Team name is required", details={"team_name": "This field is required."})

        filled = count_filled(tournament.id)
        if filled >= tournament.max_capacity:
            logger.info(f"Registration refused for {tournament.slug}: full ({filled}/{tournament.max_capacity})")
            raise CapacityExceeded()

        registration = Registration.objects.create(
            tournament=tournament,
            team_name=team_name,
            leader_name=leader_name,
            leader_game_id=leader_game_id,
            leader_whatsapp=leader_whatsapp,
            transaction_id=transaction_id,
            payment_screenshot_url=payment_proof_locator or None,
            idempotency_key=idempotency_key,
        )
        Participant.objects.bulk_create(
            [
                Participant(registration=registration, slot_position=position, **member)
                for position, member in enumerate(roster, start=1)
            ]
        )

    slots_remaining = tournament.max_capacity - (filled + 1)
    logger.info(
        f"Registration {registration.id} admitted to {tournament.slug} "
        f"({filled + 1}/{tournament.max_capacity}, {slots_remaining} left)"
    )
    return {"success": True, "registration_id": registration.id, "slots_remaining": slots_remaining}


# ============= Status Transitions =============


@service_result
def update_registration_status(registration_id, new_status, admin_id, reason=None):
    """
    Approve or reject a pending registration and record an AdminAction.

    Authorization is checked before the registration is looked up, so an
    unauthorized caller learns nothing about which registrations exist.
    Approved and rejected registrations are final.
    """
    if not has_admin_role(admin_id):
        logger.warning(f"Status change on registration {registration_id} refused for user {admin_id}")
        raise Unauthorized()

    if new_status not in DECISION_STATUSES:
        raise ValidationFailure(
            "Status must be approved or rejected",
            details={"status": f"Invalid choice: {new_status}"},
        )

    reason = _clean(reason) or None

    with transaction.atomic():
        try:
            tournament_id = (
                Registration.objects.filter(id=registration_id).values_list("tournament_id", flat=True).first()
            )
        except (ValueError, TypeError):
            tournament_id = None
        if tournament_id is None:
            raise NotFound("Registration not found")

        # Same lock order as admission: tournament row first, then the registration
        list(Tournament.objects.select_for_update().filter(id=tournament_id))
        registration = Registration.objects.select_for_update().get(id=registration_id)

        old_status = registration.status
        if old_status != "pending":
            raise InvalidTransition(f"Registration is already {old_status}")

        registration.status = new_status
        registration.rejection_reason = reason if new_status == "rejected" else None
        registration.save(update_fields=["status", "rejection_reason", "updated_at"])

        AdminAction.objects.create(
            registration=registration,
            admin_user_id=admin_id,
            action=new_status,
            reason=reason,
        )

    logger.info(f"Registration {registration.id} {old_status} -> {new_status} by admin {admin_id}")
    return {
        "success": True,
        "registration_id": registration.id,
        "old_status": old_status,
        "new_status": new_status,
    }


# ============= Lookups =============


def list_registrations(tournament_id=None, status=None):
    """Registrations with their roster, newest first, for the admin panel"""
    queryset = Registration.objects.select_related("tournament").prefetch_related("participants")
    if tournament_id:
        try:
            queryset = queryset.filter(tournament_id=int(tournament_id))
        except (TypeError, ValueError):
            return queryset.none()
    if status:
        queryset = queryset.filter(status=status)
    return queryset


@service_result
def lookup_registration(transaction_id):
    """Public status check by payment transaction reference"""
    transaction_id = _clean(transaction_id)
    if not transaction_id:
        raise ValidationFailure("Transaction ID is required", details={"transaction_id": "This field is required."})

    registrations = Registration.objects.filter(transaction_id=transaction_id).select_related("tournament")
    results = [
        {
            "registration_id": registration.id,
            "tournament": registration.tournament.slug,
            "status": registration.status,
            "rejection_reason": registration.rejection_reason,
            "created_at": registration.created_at.isoformat(),
        }
        for registration in registrations
    ]
    if not results:
        raise NotFound("No registration found for this transaction ID")
    return {"success": True, "registrations": results}
