"""
Factory Boy factories for creating test data
"""
from django.contrib.auth import get_user_model

import factory
from factory.django import DjangoModelFactory
from faker import Faker

from accounts.models import UserRole
from tournaments.models import AdminAction, Participant, Registration, Tournament

fake = Faker()


class UserFactory(DjangoModelFactory):
    """Factory for User model"""

    class Meta:
        model = get_user_model()
        django_get_or_create = ("username",)

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.Sequence(lambda n: f"user{n}@test.com")
    password = factory.PostGenerationMethodCall("set_password", "testpass123")
    is_active = True


class UserRoleFactory(DjangoModelFactory):
    class Meta:
        model = UserRole

    user = factory.SubFactory(UserFactory)
    role = "admin"


class AdminUserFactory(UserFactory):
    """User with the admin role"""

    username = factory.Sequence(lambda n: f"admin{n}")
    role = factory.RelatedFactory(UserRoleFactory, factory_related_name="user", role="admin")


class TournamentFactory(DjangoModelFactory):
    """Factory for Tournament model (one per game/mode pair)"""

    class Meta:
        model = Tournament
        django_get_or_create = ("game", "mode")

    game = "bgmi"
    mode = "squad"
    entry_fee_rs = 80
    prize_winner_rs = 350
    prize_runner_rs = 250
    prize_per_kill_rs = 9
    max_capacity = 25
    is_active = True


class RegistrationFactory(DjangoModelFactory):
    """Factory for Registration model (without participants)"""

    class Meta:
        model = Registration

    tournament = factory.SubFactory(TournamentFactory)
    status = "pending"
    team_name = factory.Sequence(lambda n: f"Team {n}")
    leader_name = factory.LazyFunction(lambda: fake.first_name())
    leader_game_id = factory.Sequence(lambda n: f"leader_{n}")
    leader_whatsapp = factory.LazyFunction(lambda: f"9{fake.numerify('#########')}")
    transaction_id = factory.Sequence(lambda n: f"TXN{n:08d}")
    payment_screenshot_url = factory.Sequence(lambda n: f"https://proofs.example.com/{n}.png")


class ParticipantFactory(DjangoModelFactory):
    class Meta:
        model = Participant

    registration = factory.SubFactory(RegistrationFactory)
    player_name = factory.LazyFunction(lambda: fake.first_name())
    player_game_id = factory.Sequence(lambda n: f"player_{n}")
    slot_position = 1


class AdminActionFactory(DjangoModelFactory):
    class Meta:
        model = AdminAction

    registration = factory.SubFactory(RegistrationFactory)
    admin_user = factory.SubFactory(AdminUserFactory)
    action = "approved"


def registration_payload(mode="squad", **overrides):
    """Valid keyword arguments for register_for_tournament"""
    teammates = {"solo": 0, "duo": 1, "squad": 3}[mode]
    tag = fake.unique.bothify("??##??")
    payload = {
        "leader_name": "Arjun Sharma",
        "leader_game_id": f"lead_{tag}",
        "leader_whatsapp": "9876543210",
        "transaction_id": f"TXN{tag}".upper(),
        "participants": [
            {"player_name": f"Player {chr(64 + i)}", "player_game_id": f"p{i}_{tag}"} for i in range(2, teammates + 2)
        ],
        "team_name": None if mode == "solo" else f"Team {tag}",
        "payment_proof_locator": f"https://proofs.example.com/{tag}.png",
    }
    payload.update(overrides)
    return payload
