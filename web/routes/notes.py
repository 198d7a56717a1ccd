"""Staff notes and the notification feed."""

from __future__ import annotations

from flask import Blueprint

from core.exceptions import ValidationError
from utils.validators import require_fields
from web.routes.common import found, get_storage, json_body, render, render_list

notes_bp = Blueprint("notes", __name__, url_prefix="/api/notes")
notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notes_bp.route("", methods=["GET"])
def list_notes():
    return render_list(get_storage().list_notes())


@notes_bp.route("", methods=["POST"])
def create_note():
    payload = json_body()
    require_fields(payload, ("title", "description"), "Title and description required")
    created_by = payload.get("createdBy") or ""
    if not isinstance(payload["title"], str) or not isinstance(payload["description"], str):
        raise ValidationError("Title and description must be strings")
    if not isinstance(created_by, str):
        raise ValidationError("'createdBy' must be a string")
    note = get_storage().create_note(payload["title"], payload["description"], created_by)
    return render(note, 201)


@notes_bp.route("/<note_id>", methods=["DELETE"])
def delete_note(note_id: str):
    if not get_storage().delete_note(note_id):
        found(None, "Note")
    return "", 204


@notifications_bp.route("", methods=["GET"])
def list_notifications():
    return render_list(get_storage().list_notifications())


@notifications_bp.route("/<notification_id>/read", methods=["POST"])
def mark_read(notification_id: str):
    return render(found(get_storage().mark_notification_read(notification_id), "Notification"))
