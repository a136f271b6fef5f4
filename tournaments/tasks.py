"""
Celery tasks for tournaments app
"""
import logging

from django.utils import timezone

from celery import shared_task

from .models import Tournament
from .notifications import ChangeEvent, publish_change

logger = logging.getLogger(__name__)


@shared_task
def broadcast_slot_resync():
    """
    Publish a "resync" hint for every active tournament
    Runs every minute via Celery Beat

    Subscribers that missed an event re-check availability on this signal.
    """
    now = timezone.now()
    tournament_ids = list(Tournament.objects.filter(is_active=True).values_list("id", flat=True))

    delivered = 0
    for tournament_id in tournament_ids:
        event = ChangeEvent(table="tournaments", action="resync", tournament_id=tournament_id)
        if publish_change(event, bump_version=False):
            delivered += 1

    if delivered < len(tournament_ids):
        logger.warning(f"Slot resync delivered for {delivered}/{len(tournament_ids)} tournaments")

    return {
        "tournaments": len(tournament_ids),
        "delivered": delivered,
        "timestamp": now.isoformat(),
    }
