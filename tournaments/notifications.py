"""
Change notifications for the registration ledger.

A ChangeEvent only says "something about tournament N changed, re-check".
Subscribers must re-read availability through the services module and never
treat an event as state: delivery is best effort, at-least-once and
unordered. Redis pub/sub carries the events; when it is unreachable,
SlotWatcher falls back to polling.
"""
import json
import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from functools import partial
from typing import Optional

from django.conf import settings
from django.core.cache import cache
from django.db import transaction

import redis

logger = logging.getLogger(__name__)

ALL = "all"

_connection = None


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    action: str
    tournament_id: Optional[int] = None
    record_id: Optional[int] = None

    def to_json(self):
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, data):
        if isinstance(data, bytes):
            data = data.decode()
        payload = json.loads(data)
        return cls(
            table=payload["table"],
            action=payload["action"],
            tournament_id=payload.get("tournament_id"),
            record_id=payload.get("record_id"),
        )


def channel_name(tournament_id=None):
    suffix = ALL if tournament_id in (None, ALL) else tournament_id
    return f"{settings.CHANGE_CHANNEL_PREFIX}:{suffix}"


def get_channel_connection():
    """Process-wide redis client for the change channel"""
    global _connection
    if _connection is None:
        _connection = redis.Redis.from_url(
            settings.CHANGE_CHANNEL_URL,
            socket_connect_timeout=2,
            socket_timeout=5,
            health_check_interval=30,
        )
    return _connection


# ============= Change versions =============


def _version_key(tournament_id):
    return f"tournaments:changes:{tournament_id}"


def get_change_version(tournament_id):
    """Counter bumped on every ledger change; lets pollers skip unchanged tournaments"""
    return cache.get(_version_key(tournament_id), 0)


def _bump_version(tournament_id):
    key = _version_key(tournament_id)
    cache.add(key, 0, timeout=None)
    try:
        return cache.incr(key)
    except ValueError:
        # Evicted between add() and incr()
        cache.set(key, 1, timeout=None)
        return 1


# ============= Publishing =============


def publish_change(event, bump_version=True):
    """
    Publish ``event`` on its tournament channel and on the "all" channel.

    Never raises: a dropped event is recovered by the subscribers' polling.
    Returns True when Redis accepted the publish.
    """
    if event.tournament_id is not None and bump_version:
        _bump_version(event.tournament_id)

    channels = [channel_name(ALL)]
    if event.tournament_id is not None:
        channels.insert(0, channel_name(event.tournament_id))

    payload = event.to_json()
    try:
        connection = get_channel_connection()
        for channel in channels:
            connection.publish(channel, payload)
    except redis.RedisError as e:
        logger.warning(
            f"Change notification dropped ({event.table} {event.action} tournament={event.tournament_id}): {e}"
        )
        return False
    return True


def notify_on_commit(event):
    """Publish once the current transaction commits (immediately in autocommit)"""
    transaction.on_commit(partial(publish_change, event))


# ============= Subscribing =============


class Subscription:
    """Decodes pub/sub messages into ChangeEvents"""

    def __init__(self, pubsub):
        self.pubsub = pubsub

    def get_event(self, timeout):
        message = self.pubsub.get_message(timeout=timeout)
        if message is None or message.get("type") != "message":
            return None
        try:
            return ChangeEvent.from_json(message["data"])
        except (ValueError, KeyError, TypeError):
            # Still tells us something changed
            logger.warning(f"Malformed change event on {message.get('channel')!r}")
            return ChangeEvent(table="unknown", action="unknown")


@contextmanager
def subscribe(tournament_id=None, connection=None):
    """
    Subscribe to changes for one tournament, or to every change when
    ``tournament_id`` is None or "all".
    """
    connection = connection or get_channel_connection()
    pubsub = connection.pubsub(ignore_subscribe_messages=True)
    pubsub.subscribe(channel_name(tournament_id))
    try:
        yield Subscription(pubsub)
    finally:
        pubsub.close()


class SlotWatcher:
    """
    Keeps an observer's copy of slot availability fresh.

    Each change event triggers a re-fetch. While subscribed the watcher also
    re-fetches at least every ``poll_interval``; while the channel is down it
    polls on that interval and retries the channel every
    ``reconnect_interval``.

    ``on_update(result, event)`` receives the fetched availability dict and
    the event that triggered it (None for timer-driven refreshes).
    """

    def __init__(
        self,
        tournament_id,
        on_update,
        poll_interval=None,
        reconnect_interval=None,
        fetch=None,
        connection_factory=None,
    ):
        self.tournament_id = tournament_id
        self.on_update = on_update
        self.poll_interval = poll_interval or settings.SLOT_WATCH_POLL_INTERVAL
        self.reconnect_interval = reconnect_interval or settings.SLOT_WATCH_RECONNECT_INTERVAL
        self.fetch = fetch or self._fetch_availability
        self.connection_factory = connection_factory or get_channel_connection
        self.subscribed = False
        self._stop = threading.Event()

    def _fetch_availability(self):
        from .services import get_all_slot_availability, get_slot_availability

        if self.tournament_id in (None, ALL):
            return get_all_slot_availability()
        return get_slot_availability(self.tournament_id)

    def refresh(self, event=None):
        result = self.fetch()
        self.on_update(result, event)
        return result

    def stop(self):
        self._stop.set()

    def run(self):
        self.refresh()
        reconnecting = False

        while not self._stop.is_set():
            try:
                with subscribe(self.tournament_id, connection=self.connection_factory()) as subscription:
                    self.subscribed = True
                    logger.info(f"Watching {channel_name(self.tournament_id)}")
                    if reconnecting:
                        # Changes made while we were polling may have no event
                        self.refresh()
                    self._listen(subscription)
            except redis.RedisError as e:
                logger.warning(f"Change channel unavailable ({e}); polling every {self.poll_interval}s")
            finally:
                self.subscribed = False

            reconnecting = True
            self._poll_until_reconnect()

    def _listen(self, subscription):
        last_refresh = time.monotonic()
        while not self._stop.is_set():
            event = subscription.get_event(timeout=self.poll_interval)
            if event is not None or time.monotonic() - last_refresh >= self.poll_interval:
                self.refresh(event)
                last_refresh = time.monotonic()

    def _poll_until_reconnect(self):
        deadline = time.monotonic() + self.reconnect_interval
        while not self._stop.is_set():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return
            if self._stop.wait(min(self.poll_interval, remaining)):
                return
            self.refresh()
