"""Pytest configuration and fixtures."""

import os
import random
import sys
from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import load_config
from services import DiscordIdentity
from storage import MemoryStorage
from web.app import create_app


START_MS = 1_700_000_000_000


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, start: int = START_MS):
        self.current = start

    def __call__(self) -> int:
        return self.current

    def advance(self, ms: int) -> None:
        self.current += ms


@pytest.fixture
def config():
    """Configuration with deterministic test values."""
    return replace(
        load_config(),
        environment="testing",
        secret_key="test-secret",
        admin_password="letmein",
        staff_user_ids=("900", "901"),
        guild_invite="discord.gg/test",
        webhook_gang_created="https://hooks.test/gang",
        webhook_ticket_created="https://hooks.test/ticket",
        webhook_user_login="",
        webhook_user_blocked="https://hooks.test/blocked",
        staff_role_mention="<@&1>",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage(clock):
    return MemoryStorage(clock=clock, rng=random.Random(1234))


@pytest.fixture
def notifier():
    """Mock webhook notifier."""
    return MagicMock()


@pytest.fixture
def oauth_client():
    """Mock Discord OAuth client returning a guild member."""
    client = MagicMock()
    client.authenticate = AsyncMock(return_value=DiscordIdentity(
        user_id="900",
        username="StaffPerson",
        access_token="token-abc",
        in_guild=True,
    ))
    return client


@pytest.fixture
def app(config, storage, notifier, oauth_client):
    return create_app(
        config,
        testing=True,
        storage=storage,
        notifier=notifier,
        oauth_client=oauth_client,
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_ticket(client):
    def _make(subject="Help", message="Stuck", user_id="123"):
        response = client.post('/api/tickets', json={
            'subject': subject,
            'message': message,
            'userId': user_id,
        })
        assert response.status_code == 201
        return response.get_json()
    return _make


@pytest.fixture
def make_gang(client):
    def _make(name="Reds", owner="u1", owner_name="Bob", password="pw", color="#FF0000"):
        response = client.post('/api/gangs', json={
            'name': name,
            'owner': owner,
            'ownerName': owner_name,
            'password': password,
            'color': color,
        })
        assert response.status_code == 201
        return response.get_json()
    return _make


@pytest.fixture
def make_giveaway(client):
    def _make(price=500, duration="1h", description="Big prize", winners_count=1):
        response = client.post('/api/giveaways', json={
            'price': price,
            'duration': duration,
            'description': description,
            'winnersCount': winners_count,
        })
        assert response.status_code == 201
        return response.get_json()
    return _make
