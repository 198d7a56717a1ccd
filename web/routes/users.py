"""User registry and block state endpoints.

Single-user reads are keyed by the external Discord id; mutations are keyed
by the registry's own id.
"""

from __future__ import annotations

from flask import Blueprint

from core import get_logger, WebhookEvent
from core.exceptions import BusinessRuleError
from utils.validators import require_fields, require_string
from web.routes.common import emit, found, get_storage, json_body, render, render_list

logger = get_logger(__name__)

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.route("", methods=["GET"])
def list_users():
    return render_list(get_storage().list_users())


@users_bp.route("/<user_id>", methods=["GET"])
def get_user(user_id: str):
    return render(found(get_storage().get_user_by_user_id(user_id), "User"))


@users_bp.route("", methods=["POST"])
def register_user():
    """Register an external id, returning the existing record when known."""
    payload = json_body()
    require_fields(payload, ("userId",), "User ID required")
    user_id = require_string(payload, "userId")

    storage = get_storage()
    with storage.transaction():
        existing = storage.get_user_by_user_id(user_id)
        if existing is not None:
            return render(existing)
        user = storage.create_user(user_id)
    return render(user, 201)


@users_bp.route("/<user_pk>", methods=["PATCH"])
def update_user(user_pk: str):
    user_id = require_string(json_body(), "userId")
    storage = get_storage()
    with storage.transaction():
        found(storage.get_user(user_pk), "User")
        holder = storage.get_user_by_user_id(user_id)
        if holder is not None and holder.id != user_pk:
            raise BusinessRuleError("User ID already registered")
        user = storage.update_user(user_pk, {"user_id": user_id})
    return render(user)


@users_bp.route("/<user_pk>/block", methods=["POST"])
def block_user(user_pk: str):
    user = found(get_storage().block_user(user_pk), "User")
    response = render(user)
    emit(WebhookEvent.USER_BLOCKED, {"userId": user.user_id, "blockedBy": "Staff"})
    return response


@users_bp.route("/<user_pk>/unblock", methods=["POST"])
def unblock_user(user_pk: str):
    return render(found(get_storage().unblock_user(user_pk), "User"))
