"""Request payload validation helpers.

Each helper raises ``ValidationError`` with a client-facing message and
returns the cleaned value, so handlers can validate before touching storage.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Type

from core.constants import MessageSender, ShopCategory, TicketStatus
from core.exceptions import ValidationError

from storage.models import Entity, to_snake


def require_json(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def require_fields(payload: Mapping[str, Any], names: Iterable[str], message: str = "Missing required fields") -> None:
    """Fail unless every named field is a non-empty value."""
    for name in names:
        value = payload.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(message)


def require_string(payload: Mapping[str, Any], name: str) -> str:
    value = payload.get(name)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{name}' must be a non-empty string")
    return value


def require_number(payload: Mapping[str, Any], name: str) -> float:
    value = payload.get(name)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"'{name}' must be a number")
    return value


def require_positive_int(payload: Mapping[str, Any], name: str) -> int:
    value = payload.get(name)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"'{name}' must be a positive integer")
    return value


def require_choice(value: Any, choices: Iterable[str], name: str) -> str:
    allowed = list(choices)
    if value not in allowed:
        raise ValidationError(f"'{name}' must be one of: {', '.join(allowed)}")
    return value


def validate_ticket(payload: Mapping[str, Any]) -> Dict[str, str]:
    return {
        "subject": require_string(payload, "subject"),
        "message": require_string(payload, "message"),
        "user_id": require_string(payload, "userId"),
    }


def validate_message(payload: Mapping[str, Any]) -> Dict[str, str]:
    return {
        "content": require_string(payload, "content"),
        "sender": require_choice(payload.get("sender"), [s.value for s in MessageSender], "sender"),
    }


def validate_ticket_status(value: Any) -> str:
    return require_choice(value, [s.value for s in TicketStatus], "status")


def validate_giveaway(payload: Mapping[str, Any]) -> Dict[str, Any]:
    description = payload.get("description", "")
    if not isinstance(description, str):
        raise ValidationError("'description' must be a string")
    return {
        "price": require_number(payload, "price"),
        "duration": require_string(payload, "duration"),
        "description": description,
        "winners_count": require_positive_int(payload, "winnersCount"),
    }


def validate_shop_product(payload: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
    """Validate a full product, or only the present fields when ``partial``."""
    cleaned: Dict[str, Any] = {}
    for name in ("name", "link"):
        if not partial or name in payload:
            cleaned[name] = require_string(payload, name)
    if not partial or "price" in payload:
        cleaned["price"] = require_number(payload, "price")
    if not partial or "category" in payload:
        cleaned["category"] = require_choice(
            payload.get("category"), [c.value for c in ShopCategory], "category"
        )
    return cleaned


def patch_fields(payload: Mapping[str, Any], model: Type[Entity]) -> Dict[str, Any]:
    """Translate a camelCase patch into the model's mutable snake_case fields.

    Unknown and immutable keys are dropped.
    """
    allowed = model.mutable_fields()
    patch = {}
    for key, value in payload.items():
        name = to_snake(key)
        if name in allowed:
            patch[name] = value
    return patch
