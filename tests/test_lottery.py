"""Tests for giveaway duration parsing and winner draws."""

import random
from unittest.mock import MagicMock

import pytest

from storage.lottery import draw_winners, parse_duration


@pytest.mark.parametrize("token, expected", [
    ("1h", 3_600_000),
    ("2d", 172_800_000),
    ("30m", 1_800_000),
    ("1w", 604_800_000),
    ("0m", 0),
])
def test_parse_duration(token, expected):
    assert parse_duration(token) == expected


@pytest.mark.parametrize("token", [
    "abc", "", "1", "h", "1y", " 1h", "1h ", "1.5h", "-1h", None,
    "1h\n", "\u0661h", "\uff11h",
])
def test_unparseable_duration_defaults(token):
    assert parse_duration(token) == 60_000


def test_draw_caps_slots_at_participant_count():
    winners = draw_winners(["solo"], 3, random.Random(0))

    assert winners == ["solo"]


def test_draw_with_no_participants():
    assert draw_winners([], 5, random.Random(0)) == []


def test_draw_picks_with_replacement():
    rng = MagicMock()
    # floor(0.1 * 3) == 0 for every slot
    rng.random.return_value = 0.1

    winners = draw_winners(["a", "b", "c"], 3, rng)

    assert winners == ["a", "a", "a"]
    assert rng.random.call_count == 3


def test_draw_uses_floor_of_scaled_random():
    rng = MagicMock()
    rng.random.side_effect = [0.0, 0.5, 0.99]

    winners = draw_winners(["a", "b", "c", "d"], 3, rng)

    assert winners == ["a", "c", "d"]


def test_draw_returns_members_of_pool():
    participants = ["a", "b", "c", "d", "e"]

    winners = draw_winners(participants, 4, random.Random(42))

    assert len(winners) == 4
    assert set(winners) <= set(participants)
