"""Announcement endpoints."""

from __future__ import annotations

from flask import Blueprint

from core import NotificationType
from utils.validators import require_fields, require_string
from web.routes.common import found, get_storage, json_body, render, render_list

announcements_bp = Blueprint("announcements", __name__, url_prefix="/api/announcements")


@announcements_bp.route("", methods=["GET"])
def list_announcements():
    return render_list(get_storage().list_announcements())


@announcements_bp.route("/<announcement_id>", methods=["GET"])
def get_announcement(announcement_id: str):
    return render(found(get_storage().get_announcement(announcement_id), "Announcement"))


@announcements_bp.route("", methods=["POST"])
def create_announcement():
    payload = json_body()
    require_fields(payload, ("title", "user", "description"))
    title = require_string(payload, "title")
    user = require_string(payload, "user")
    description = require_string(payload, "description")

    storage = get_storage()
    with storage.transaction():
        announcement = storage.create_announcement(title, user, description)
        storage.create_notification(
            NotificationType.ANNOUNCEMENT_NEW.value,
            f"New Announcement: {title}",
            f"{description[:100]}...",
        )
    return render(announcement, 201)


@announcements_bp.route("/<announcement_id>", methods=["DELETE"])
def delete_announcement(announcement_id: str):
    if not get_storage().delete_announcement(announcement_id):
        found(None, "Announcement")
    return "", 204
