"""
Pytest fixtures and configuration for GameArena tests
"""
import time

from django.conf import settings
from django.core.cache import cache

import pytest
import redis
from rest_framework.test import APIClient

from tests.factories import AdminUserFactory, UserFactory
from tournaments.catalog import get_tournament, seed_catalog


# Check if Redis is available
def redis_available():
    """Check if Redis server is running"""
    try:
        r = redis.Redis.from_url(settings.CHANGE_CHANNEL_URL, socket_connect_timeout=1)
        r.ping()
        return True
    except (redis.ConnectionError, redis.TimeoutError):
        return False


# Pytest marker for Redis-dependent tests
def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "redis_required: mark test as requiring Redis server")


# Skip Redis tests if Redis is not available
def pytest_collection_modifyitems(config, items):
    """Skip Redis tests if Redis is not running"""
    if not any("redis_required" in item.keywords for item in items):
        return
    if not redis_available():
        skip_redis = pytest.mark.skip(reason="Redis server not available (run 'redis-server' to enable pub/sub tests)")
        for item in items:
            if "redis_required" in item.keywords:
                item.add_marker(skip_redis)


class FakePubSub:
    """In-memory stand-in for a redis PubSub object"""

    def __init__(self, connection):
        self.connection = connection
        self.messages = []
        self.closed = False

    def subscribe(self, *channels):
        if self.connection.down:
            raise self.connection.error("Connection refused")
        for channel in channels:
            self.connection.subscribers.setdefault(channel, []).append(self)

    def get_message(self, timeout=0.0):
        deadline = time.monotonic() + (timeout or 0)
        while True:
            if self.connection.down:
                raise self.connection.error("Connection lost")
            if self.messages:
                return self.messages.pop(0)
            if time.monotonic() >= deadline:
                return None
            time.sleep(0.005)

    def close(self):
        self.closed = True
        for subscribers in self.connection.subscribers.values():
            if self in subscribers:
                subscribers.remove(self)


class FakeChannelConnection:
    """Records publishes and delivers them to current FakePubSub subscribers"""

    def __init__(self):
        self.error = redis.ConnectionError
        self.down = False
        self.published = []
        self.subscribers = {}

    def publish(self, channel, payload):
        if self.down:
            raise self.error("Connection refused")
        self.published.append((channel, payload))
        receivers = list(self.subscribers.get(channel, []))
        for pubsub in receivers:
            pubsub.messages.append({"type": "message", "channel": channel, "data": payload})
        return len(receivers)

    def pubsub(self, ignore_subscribe_messages=True):
        return FakePubSub(self)

    def channels(self):
        return [channel for channel, _ in self.published]


@pytest.fixture(autouse=True)
def change_channel(monkeypatch):
    """Route change notifications to an in-memory connection"""
    connection = FakeChannelConnection()
    monkeypatch.setattr("tournaments.notifications.get_channel_connection", lambda: connection)
    return connection


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear cache before and after each test"""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Return DRF API client"""
    return APIClient()


@pytest.fixture
def admin_user(db):
    """Create a user holding the admin role"""
    return AdminUserFactory()


@pytest.fixture
def regular_user(db):
    """Create a user without the admin role"""
    return UserFactory()


@pytest.fixture
def admin_client(api_client, admin_user):
    """Return API client authenticated as an admin"""
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def user_client(api_client, regular_user):
    """Return API client authenticated as a non-admin user"""
    api_client.force_authenticate(user=regular_user)
    return api_client


@pytest.fixture
def catalog(db):
    """Seed the six default tournaments"""
    seed_catalog()


@pytest.fixture
def bgmi_solo(catalog):
    return get_tournament("bgmi", "solo")


@pytest.fixture
def bgmi_squad(catalog):
    return get_tournament("bgmi", "squad")


@pytest.fixture
def freefire_duo(catalog):
    return get_tournament("freefire", "duo")


@pytest.fixture
def freefire_squad(catalog):
    return get_tournament("freefire", "squad")
