"""Giveaway endpoints.

There is no background timer: giveaways past their deadline are ended the
next time the collection is listed or touched by a join/leave.
"""

from __future__ import annotations

from typing import Iterable

from flask import Blueprint

from core import get_logger, GiveawayStatus, NotificationType
from core.exceptions import GiveawayClosedError
from storage import MemoryStorage
from storage.models import Giveaway
from utils.validators import require_string, validate_giveaway
from web.routes.common import found, get_storage, json_body, render, render_list

logger = get_logger(__name__)

giveaways_bp = Blueprint("giveaways", __name__, url_prefix="/api/giveaways")


def announce_winners(storage: MemoryStorage, ended: Iterable[Giveaway]) -> None:
    for giveaway in ended:
        if not giveaway.winners:
            continue
        storage.create_notification(
            NotificationType.GIVEAWAY_WIN.value,
            f"Giveaway Ended: {giveaway.price}",
            f"Winners: {', '.join(giveaway.winners)}",
        )


def expire_due(storage: MemoryStorage) -> None:
    """End overdue giveaways and post their winners to the feed."""
    with storage.transaction():
        announce_winners(storage, storage.expire_giveaways())


@giveaways_bp.route("", methods=["GET"])
def list_giveaways():
    storage = get_storage()
    with storage.transaction():
        expire_due(storage)
        giveaways = storage.list_giveaways()
    return render_list(giveaways)


@giveaways_bp.route("/<giveaway_id>", methods=["GET"])
def get_giveaway(giveaway_id: str):
    return render(found(get_storage().get_giveaway(giveaway_id), "Giveaway"))


@giveaways_bp.route("", methods=["POST"])
def create_giveaway():
    data = validate_giveaway(json_body())
    storage = get_storage()
    with storage.transaction():
        giveaway = storage.create_giveaway(**data)
        storage.create_notification(
            NotificationType.GIVEAWAY_NEW.value,
            f"New Giveaway: {giveaway.price}",
            giveaway.description or "A new giveaway has been created!",
        )
    return render(giveaway, 201)


@giveaways_bp.route("/<giveaway_id>", methods=["DELETE"])
def delete_giveaway(giveaway_id: str):
    if not get_storage().delete_giveaway(giveaway_id):
        found(None, "Giveaway")
    return "", 204


@giveaways_bp.route("/<giveaway_id>/join", methods=["POST"])
def join_giveaway(giveaway_id: str):
    username = require_string(json_body(), "username")
    storage = get_storage()
    with storage.transaction():
        expire_due(storage)
        giveaway = found(storage.get_giveaway(giveaway_id), "Giveaway")
        if giveaway.status == GiveawayStatus.ENDED.value:
            raise GiveawayClosedError("Giveaway has ended")
        giveaway = storage.join_giveaway(giveaway_id, username)
    return render(giveaway)


@giveaways_bp.route("/<giveaway_id>/leave", methods=["POST"])
def leave_giveaway(giveaway_id: str):
    username = require_string(json_body(), "username")
    storage = get_storage()
    with storage.transaction():
        expire_due(storage)
        giveaway = found(storage.get_giveaway(giveaway_id), "Giveaway")
        if giveaway.status == GiveawayStatus.ENDED.value:
            raise GiveawayClosedError("Giveaway has ended")
        giveaway = storage.leave_giveaway(giveaway_id, username)
    return render(giveaway)


@giveaways_bp.route("/<giveaway_id>/end", methods=["POST"])
def end_giveaway(giveaway_id: str):
    storage = get_storage()
    with storage.transaction():
        before = found(storage.get_giveaway(giveaway_id), "Giveaway")
        giveaway = storage.end_giveaway(giveaway_id)
        if before.status == GiveawayStatus.ACTIVE.value:
            announce_winners(storage, [giveaway])
            logger.info(f"Giveaway {giveaway_id} ended by staff")
    return render(giveaway)
