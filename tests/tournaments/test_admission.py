"""
Test cases for the admission transaction
"""
from unittest.mock import patch

from django.db import DatabaseError

import pytest

from tests.factories import RegistrationFactory, registration_payload
from tournaments.models import Participant, Registration
from tournaments.services import get_slot_availability, register_for_tournament

# Roster integrity


@pytest.mark.django_db
def test_squad_registration_creates_four_participants(bgmi_squad):
    payload = registration_payload("squad")

    result = register_for_tournament(bgmi_squad.id, **payload)

    assert result["success"] is True
    assert result["slots_remaining"] == 24
    registration = Registration.objects.get(id=result["registration_id"])
    assert registration.status == "pending"
    assert registration.team_name == payload["team_name"]
    positions = list(registration.participants.values_list("slot_position", flat=True))
    assert sorted(positions) == [1, 2, 3, 4]

    leader = registration.participants.get(slot_position=1)
    assert leader.player_name == payload["leader_name"]
    assert leader.player_game_id == payload["leader_game_id"]


@pytest.mark.django_db
def test_duo_registration_creates_two_participants(freefire_duo):
    result = register_for_tournament(freefire_duo.id, **registration_payload("duo"))

    assert result["success"] is True
    assert Participant.objects.filter(registration_id=result["registration_id"]).count() == 2


@pytest.mark.django_db
def test_solo_registration_has_only_the_leader(bgmi_solo):
    result = register_for_tournament(bgmi_solo.id, **registration_payload("solo", team_name="Ignored Team"))

    assert result["success"] is True
    registration = Registration.objects.get(id=result["registration_id"])
    assert registration.team_name is None
    assert list(registration.participants.values_list("slot_position", flat=True)) == [1]


@pytest.mark.django_db
def test_squad_with_missing_teammate_is_rejected(bgmi_squad):
    payload = registration_payload("squad")
    payload["participants"] = payload["participants"][:2]

    result = register_for_tournament(bgmi_squad.id, **payload)

    assert result["success"] is False
    assert result["error"] == "validation"
    assert "participants" in result["details"]
    assert Registration.objects.count() == 0


@pytest.mark.django_db
def test_solo_with_teammates_is_rejected(bgmi_solo):
    payload = registration_payload("solo")
    payload["participants"] = [{"player_name": "Extra", "player_game_id": "extra_1"}]

    result = register_for_tournament(bgmi_solo.id, **payload)

    assert result["error"] == "validation"


@pytest.mark.django_db
def test_incomplete_teammate_is_rejected(freefire_duo):
    payload = registration_payload("duo")
    payload["participants"] = [{"player_name": "Ravi", "player_game_id": "  "}]

    result = register_for_tournament(freefire_duo.id, **payload)

    assert result["error"] == "validation"
    assert Registration.objects.count() == 0


@pytest.mark.django_db
def test_duplicate_game_ids_in_roster_are_rejected(freefire_duo):
    payload = registration_payload("duo")
    payload["participants"] = [{"player_name": "Twin", "player_game_id": payload["leader_game_id"]}]

    result = register_for_tournament(freefire_duo.id, **payload)

    assert result["error"] == "validation"


@pytest.mark.django_db
def test_team_name_required_for_team_modes(bgmi_squad):
    result = register_for_tournament(bgmi_squad.id, **registration_payload("squad", team_name="   "))

    assert result["error"] == "validation"
    assert "team_name" in result["details"]


@pytest.mark.django_db
@pytest.mark.parametrize("field", ["leader_name", "leader_game_id", "leader_whatsapp", "transaction_id"])
def test_missing_leader_details_are_rejected(bgmi_solo, field):
    result = register_for_tournament(bgmi_solo.id, **registration_payload("solo", **{field: ""}))

    assert result["success"] is False
    assert result["error"] == "validation"
    assert field in result["details"]


# Tournament lookup and capacity


@pytest.mark.django_db
def test_unknown_tournament(catalog):
    result = register_for_tournament(999999, **registration_payload("solo"))

    assert result["success"] is False
    assert result["error"] == "not_found"


@pytest.mark.django_db
def test_inactive_tournament_is_not_found(bgmi_solo):
    bgmi_solo.is_active = False
    bgmi_solo.save()

    result = register_for_tournament(bgmi_solo.id, **registration_payload("solo"))

    assert result["error"] == "not_found"
    assert Registration.objects.count() == 0


@pytest.mark.django_db
def test_full_tournament_refuses_registration(freefire_squad):
    RegistrationFactory.create_batch(12, tournament=freefire_squad)

    result = register_for_tournament(freefire_squad.id, **registration_payload("squad"))

    assert result == {"success": False, "error": "full", "message": "Tournament is full"}
    assert Registration.objects.filter(tournament=freefire_squad).count() == 12


@pytest.mark.django_db
def test_last_slot_is_admitted(freefire_squad):
    RegistrationFactory.create_batch(11, tournament=freefire_squad)

    result = register_for_tournament(freefire_squad.id, **registration_payload("squad"))

    assert result["success"] is True
    assert result["slots_remaining"] == 0
    assert get_slot_availability(freefire_squad.id)["remaining"] == 0


@pytest.mark.django_db
def test_rejected_registrations_do_not_block_admission(freefire_squad):
    RegistrationFactory.create_batch(11, tournament=freefire_squad)
    RegistrationFactory.create_batch(5, tournament=freefire_squad, status="rejected")

    result = register_for_tournament(freefire_squad.id, **registration_payload("squad"))

    assert result["success"] is True


@pytest.mark.django_db
def test_over_capacity_tournament_still_refuses(freefire_squad):
    RegistrationFactory.create_batch(6, tournament=freefire_squad)
    freefire_squad.max_capacity = 4
    freefire_squad.save()

    result = register_for_tournament(freefire_squad.id, **registration_payload("squad"))

    assert result["error"] == "full"


# Idempotency


@pytest.mark.django_db
def test_repeat_submission_returns_original_registration(bgmi_squad):
    payload = registration_payload("squad", idempotency_key="form-submit-1")

    first = register_for_tournament(bgmi_squad.id, **payload)
    second = register_for_tournament(bgmi_squad.id, **payload)

    assert first["success"] is True
    assert second["success"] is True
    assert second["duplicate"] is True
    assert second["registration_id"] == first["registration_id"]
    assert second["slots_remaining"] == first["slots_remaining"]
    assert Registration.objects.filter(tournament=bgmi_squad).count() == 1


@pytest.mark.django_db
def test_idempotency_key_cannot_be_reused_across_tournaments(bgmi_squad, freefire_squad):
    register_for_tournament(bgmi_squad.id, **registration_payload("squad", idempotency_key="shared-key"))

    result = register_for_tournament(freefire_squad.id, **registration_payload("squad", idempotency_key="shared-key"))

    assert result["error"] == "validation"
    assert "idempotency_key" in result["details"]


@pytest.mark.django_db
def test_blank_idempotency_key_is_ignored(bgmi_solo):
    register_for_tournament(bgmi_solo.id, **registration_payload("solo", idempotency_key=""))
    register_for_tournament(bgmi_solo.id, **registration_payload("solo", idempotency_key=""))

    assert Registration.objects.filter(tournament=bgmi_solo, idempotency_key__isnull=True).count() == 2


# Storage failures


@pytest.mark.django_db
def test_participant_insert_failure_rolls_back_registration(bgmi_squad):
    with patch("tournaments.services.Participant.objects.bulk_create", side_effect=DatabaseError("disk full")):
        result = register_for_tournament(bgmi_squad.id, **registration_payload("squad"))

    assert result["success"] is False
    assert result["error"] == "storage"
    assert Registration.objects.count() == 0
    assert get_slot_availability(bgmi_squad.id)["filled"] == 0


@pytest.mark.django_db
@pytest.mark.parametrize("participants", [["Alice"], [None], [["Alice", "alice_01"]]])
def test_malformed_teammate_entry_is_rejected(freefire_duo, participants):
    result = register_for_tournament(freefire_duo.id, **registration_payload("duo", participants=participants))

    assert result["success"] is False
    assert result["error"] == "validation"
    assert "participants" in result["details"]
    assert Registration.objects.count() == 0


@pytest.mark.django_db
@pytest.mark.parametrize("participants", ["Alice", 42, {"player_name": "Alice", "player_game_id": "alice_01"}])
def test_participants_must_be_a_list(freefire_duo, participants):
    result = register_for_tournament(freefire_duo.id, **registration_payload("duo", participants=participants))

    assert result["error"] == "validation"
    assert Registration.objects.count() == 0
