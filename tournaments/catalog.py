"""
Reference data for the six GameArena tournaments
"""
import logging

from .models import Tournament

logger = logging.getLogger(__name__)

# Players per registration for each mode
ROSTER_SIZES = {
    "solo": 1,
    "duo": 2,
    "squad": 4,
}

DEFAULT_TOURNAMENTS = [
    # BGMI: Winner 350, Runner-up 250, 9 per kill
    {"game": "bgmi", "mode": "solo", "entry_fee_rs": 20, "prize_winner_rs": 350, "prize_runner_rs": 250,
     "prize_per_kill_rs": 9, "max_capacity": 100},
    {"game": "bgmi", "mode": "duo", "entry_fee_rs": 40, "prize_winner_rs": 350, "prize_runner_rs": 250,
     "prize_per_kill_rs": 9, "max_capacity": 50},
    {"game": "bgmi", "mode": "squad", "entry_fee_rs": 80, "prize_winner_rs": 350, "prize_runner_rs": 250,
     "prize_per_kill_rs": 9, "max_capacity": 25},
    # Free Fire: Winner 350, Runner-up 150, 5 per kill
    {"game": "freefire", "mode": "solo", "entry_fee_rs": 20, "prize_winner_rs": 350, "prize_runner_rs": 150,
     "prize_per_kill_rs": 5, "max_capacity": 48},
    {"game": "freefire", "mode": "duo", "entry_fee_rs": 40, "prize_winner_rs": 350, "prize_runner_rs": 150,
     "prize_per_kill_rs": 5, "max_capacity": 24},
    {"game": "freefire", "mode": "squad", "entry_fee_rs": 80, "prize_winner_rs": 350, "prize_runner_rs": 150,
     "prize_per_kill_rs": 5, "max_capacity": 12},
]


def roster_size(mode):
    """Number of participants a registration in ``mode`` must list (leader included)"""
    try:
        return ROSTER_SIZES[mode]
    except KeyError:
        raise ValueError(f"Unknown match mode: {mode}")


def get_tournament(game, mode):
    return Tournament.objects.get(game=game, mode=mode)


def seed_catalog():
    """
    Create any missing default tournaments.

    Existing (game, mode) rows are left untouched so capacity edits made by
    an operator survive re-seeding. Returns the list of created tournaments.
    """
    created = []
    for entry in DEFAULT_TOURNAMENTS:
        defaults = {k: v for k, v in entry.items() if k not in ("game", "mode")}
        tournament, was_created = Tournament.objects.get_or_create(
            game=entry["game"], mode=entry["mode"], defaults=defaults
        )
        if was_created:
            logger.info(f"Seeded tournament {tournament.slug} ({tournament.max_capacity} slots)")
            created.append(tournament)
    return created
