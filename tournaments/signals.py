"""
Signal handlers that turn ledger writes into change notifications
"""
from django.core.cache import cache
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from tournaments.models import AdminAction, Registration, Tournament
from tournaments.notifications import ChangeEvent, notify_on_commit

TOURNAMENT_LIST_CACHE_KEY = "tournaments:list:all"


def _invalidate_on_commit(event):
    transaction.on_commit(lambda: cache.delete(TOURNAMENT_LIST_CACHE_KEY))
    notify_on_commit(event)


@receiver(post_save, sender=Tournament)
def tournament_saved(sender, instance, created, **kwargs):
    """Capacity edits and deactivation change what observers should show"""
    _invalidate_on_commit(
        ChangeEvent(table="tournaments", action="insert" if created else "update", tournament_id=instance.id)
    )


@receiver(post_save, sender=Registration)
def registration_saved(sender, instance, created, **kwargs):
    _invalidate_on_commit(
        ChangeEvent(
            table="registrations",
            action="insert" if created else "update",
            tournament_id=instance.tournament_id,
            record_id=instance.id,
        )
    )


@receiver(post_delete, sender=Registration)
def registration_deleted(sender, instance, **kwargs):
    _invalidate_on_commit(
        ChangeEvent(
            table="registrations", action="delete", tournament_id=instance.tournament_id, record_id=instance.id
        )
    )


@receiver(post_save, sender=AdminAction)
def admin_action_saved(sender, instance, created, **kwargs):
    if not created:
        return
    notify_on_commit(
        ChangeEvent(
            table="admin_actions",
            action="insert",
            tournament_id=instance.registration.tournament_id,
            record_id=instance.id,
        )
    )
