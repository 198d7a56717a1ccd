"""Tests for payload validation helpers and configuration parsing."""

import pytest

import config as config_module
from core.exceptions import ValidationError
from storage.models import Gang, Ticket, to_camel, to_snake
from utils.validators import (
    patch_fields,
    require_fields,
    require_number,
    require_string,
    validate_giveaway,
    validate_shop_product,
)


def test_require_fields_rejects_blank_strings():
    with pytest.raises(ValidationError, match="Missing required fields"):
        require_fields({'a': '  '}, ['a'])


@pytest.mark.parametrize("value", [True, "5", None, [1]])
def test_require_number_rejects_non_numbers(value):
    with pytest.raises(ValidationError):
        require_number({'price': value}, 'price')


@pytest.mark.parametrize("payload", [{}, {'name': None}, {'name': ' '}, {'name': 3}])
def test_require_string_rejects_missing_or_blank(payload):
    with pytest.raises(ValidationError, match="must be a non-empty string"):
        require_string(payload, 'name')


def test_validate_giveaway_defaults_description():
    data = validate_giveaway({'price': 1.5, 'duration': '1h', 'winnersCount': 2})

    assert data == {'price': 1.5, 'duration': '1h', 'description': '', 'winners_count': 2}


def test_partial_shop_product_only_checks_present_fields():
    assert validate_shop_product({'name': 'New'}, partial=True) == {'name': 'New'}
    with pytest.raises(ValidationError):
        validate_shop_product({'name': 'New'})


def test_patch_fields_maps_camel_case_and_drops_immutable():
    patch = patch_fields({'claimedBy': 'Mod', 'ticketNumber': '1', 'createdAt': 0, 'bogus': 1}, Ticket)

    assert patch == {'claimed_by': 'Mod'}


def test_gang_roster_is_not_patchable():
    assert patch_fields({'members': [], 'ranks': [], 'ownerName': 'X'}, Gang) == {'owner_name': 'X'}


@pytest.mark.parametrize("snake, camel", [
    ("ticket_number", "ticketNumber"),
    ("is_online", "isOnline"),
    ("id", "id"),
])
def test_case_conversion(snake, camel):
    assert to_camel(snake) == camel
    assert to_snake(camel) == snake


def test_staff_ids_are_parsed_as_strings(monkeypatch):
    monkeypatch.setenv("STAFF_USER_IDS", "123456789012345678, 987654321098765432,,")
    monkeypatch.setenv("WEB_PORT", "not-a-port")

    loaded = config_module.load_config()

    assert loaded.staff_user_ids == ("123456789012345678", "987654321098765432")
    assert loaded.web_port == 5000
