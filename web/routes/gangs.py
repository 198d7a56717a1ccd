"""Gang endpoints, including the single-gang-per-user join flow."""

from __future__ import annotations

import uuid

from flask import Blueprint

from core import get_logger, GangDefaults, NotificationType, WebhookEvent
from core.exceptions import DuplicateMembershipError, InvalidGangPasswordError, ValidationError
from storage import MemoryStorage
from storage.models import Gang, GangMember, to_camel
from utils.validators import patch_fields, require_fields, require_string
from web.routes.common import emit, found, get_storage, json_body, render, render_list

logger = get_logger(__name__)

gangs_bp = Blueprint("gangs", __name__, url_prefix="/api/gangs")

GANG_FIELDS = ("name", "owner", "ownerName", "password", "color")


def join_gang(storage: MemoryStorage, gang_id: str, username: str, password: str) -> Gang:
    """Move ``username`` into a gang, leaving any gang they were in before.

    Runs under the store lock so no request observes the user in two gangs.

    Raises:
        NotFoundError: If the gang does not exist
        InvalidGangPasswordError: If the password does not match exactly
        DuplicateMembershipError: If the user is already a member
    """
    with storage.transaction():
        target = found(storage.get_gang(gang_id), "Gang")
        if target.password != password:
            raise InvalidGangPasswordError("Invalid password")

        for gang in storage.list_gangs():
            if gang.id == gang_id:
                continue
            previous = gang.find_member(username)
            if previous is not None:
                storage.remove_gang_member(gang.id, previous.id)
                logger.info(f"{username} left gang '{gang.name}' to join '{target.name}'")

        if target.find_member(username) is not None:
            raise DuplicateMembershipError("Already a member of this gang")

        member = GangMember(
            id=str(uuid.uuid4()),
            username=username,
            gang_id=gang_id,
            rank=GangDefaults.JOIN_RANK,
            joined_at=storage.now(),
            is_online=True,
        )
        updated = storage.add_gang_member(gang_id, member)

    logger.info(f"{username} joined gang '{updated.name}'")
    return updated


@gangs_bp.route("", methods=["GET"])
def list_gangs():
    return render_list(get_storage().list_gangs())


@gangs_bp.route("/<gang_id>", methods=["GET"])
def get_gang(gang_id: str):
    return render(found(get_storage().get_gang(gang_id), "Gang"))


@gangs_bp.route("", methods=["POST"])
def create_gang():
    payload = json_body()
    require_fields(payload, GANG_FIELDS)
    for name in GANG_FIELDS:
        require_string(payload, name)

    storage = get_storage()
    with storage.transaction():
        gang = storage.create_gang(
            name=payload["name"],
            owner=payload["owner"],
            owner_name=payload["ownerName"],
            password=payload["password"],
            color=payload["color"],
        )
        storage.create_notification(
            NotificationType.GANG_NEW.value,
            f"New Gang Created: {gang.name}",
            f"Gang created by {gang.owner_name}. Owner: {gang.owner}",
        )

    response = render(gang, 201)
    emit(WebhookEvent.GANG_CREATED, {
        "name": gang.name,
        "owner": gang.owner,
        "ownerName": gang.owner_name,
        "color": gang.color,
    })
    return response


@gangs_bp.route("/<gang_id>", methods=["PATCH"])
def update_gang(gang_id: str):
    patch = patch_fields(json_body(), Gang)
    for name, value in patch.items():
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"'{to_camel(name)}' must be a non-empty string")
    return render(found(get_storage().update_gang(gang_id, patch), "Gang"))


@gangs_bp.route("/<gang_id>", methods=["DELETE"])
def delete_gang(gang_id: str):
    if not get_storage().delete_gang(gang_id):
        found(None, "Gang")
    return "", 204


@gangs_bp.route("/<gang_id>/join", methods=["POST"])
def join(gang_id: str):
    payload = json_body()
    username = require_string(payload, "username")
    password = require_string(payload, "password")
    return render(join_gang(get_storage(), gang_id, username, password), 201)


@gangs_bp.route("/<gang_id>/members/<member_id>", methods=["DELETE"])
def remove_member(gang_id: str, member_id: str):
    return render(found(get_storage().remove_gang_member(gang_id, member_id), "Gang"))
