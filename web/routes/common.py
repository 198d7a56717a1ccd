"""Helpers shared by the API blueprints."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, TypeVar

from flask import current_app, jsonify, request

from core import get_logger, WebhookEvent
from core.exceptions import NotFoundError
from storage import MemoryStorage
from storage.models import Entity
from utils.validators import require_json

logger = get_logger(__name__)

T = TypeVar("T")


def get_storage() -> MemoryStorage:
    return current_app.config["STORAGE"]


def json_body() -> Dict[str, Any]:
    """Return the request JSON object or fail with a validation error."""
    return require_json(request.get_json(silent=True))


def found(value: Optional[T], label: str) -> T:
    """Turn the store's absence marker into a 404."""
    if value is None:
        raise NotFoundError(f"{label} not found")
    return value


def render(entity: Entity, status: int = 200):
    return jsonify(entity.to_dict()), status


def render_list(entities: Iterable[Entity]):
    return jsonify([e.to_dict() for e in entities])


def emit(event: WebhookEvent, data: Mapping[str, Any]) -> None:
    """Hand an event to the webhook notifier without affecting the request."""
    notifier = current_app.config.get("NOTIFIER")
    if notifier is None:
        return
    try:
        notifier.notify(event.value, dict(data))
    except Exception:
        logger.exception(f"Failed to schedule {event.value} webhook")
