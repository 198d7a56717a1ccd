"""Support ticket and ticket message endpoints."""

from __future__ import annotations

from flask import Blueprint, jsonify

from core import (
    get_logger,
    MessageSender,
    NotificationType,
    TicketDefaults,
    TicketStatus,
    WebhookEvent,
)
from core.exceptions import BusinessRuleError, InvalidTransitionError, ValidationError
from services.auto_reply import acknowledgement, generate_reply
from storage.models import Ticket, to_camel
from utils.validators import patch_fields, validate_message, validate_ticket, validate_ticket_status
from web.routes.common import emit, found, get_storage, json_body, render, render_list

logger = get_logger(__name__)

tickets_bp = Blueprint("tickets", __name__, url_prefix="/api/tickets")

# Target statuses reachable from each status; closed is terminal
TRANSITIONS = {
    TicketStatus.OPEN.value: {TicketStatus.OPEN.value, TicketStatus.CLAIMED.value, TicketStatus.CLOSED.value},
    TicketStatus.CLAIMED.value: {TicketStatus.CLAIMED.value, TicketStatus.CLOSED.value},
    TicketStatus.CLOSED.value: {TicketStatus.CLOSED.value},
}


def check_transition(current: str, target: str) -> None:
    if target not in TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(f"Cannot change ticket status from {current} to {target}")


@tickets_bp.route("", methods=["GET"])
def list_tickets():
    return render_list(get_storage().list_tickets())


@tickets_bp.route("/<ticket_id>", methods=["GET"])
def get_ticket(ticket_id: str):
    return render(found(get_storage().get_ticket(ticket_id), "Ticket"))


@tickets_bp.route("", methods=["POST"])
def create_ticket():
    """Open a ticket together with its acknowledgement message and feed entry."""
    data = validate_ticket(json_body())
    storage = get_storage()

    with storage.transaction():
        ticket = storage.create_ticket(**data)
        # The ticket is authoritative; follow-up records are best effort
        try:
            storage.create_message(ticket.id, TicketDefaults.ACK_MESSAGE, MessageSender.STAFF.value)
            storage.create_notification(
                NotificationType.TICKET_NEW.value,
                f"New Ticket: {ticket.subject}",
                ticket.message[:TicketDefaults.NOTIFICATION_PREVIEW],
            )
        except Exception:
            logger.exception(f"Ticket #{ticket.ticket_number} created without follow-up records")

    response = render(ticket, 201)
    emit(WebhookEvent.TICKET_CREATED, {
        "ticketNumber": ticket.ticket_number,
        "subject": ticket.subject,
        "message": ticket.message,
        "userId": ticket.user_id,
    })
    return response


@tickets_bp.route("/<ticket_id>", methods=["PATCH"])
def update_ticket(ticket_id: str):
    payload = json_body()
    patch = patch_fields(payload, Ticket)
    if "status" in patch:
        validate_ticket_status(patch["status"])
    if patch.get("claimed_by") is not None and not isinstance(patch["claimed_by"], str):
        raise ValidationError("'claimedBy' must be a string")
    for name in ("subject", "message", "user_id"):
        if name in patch and (not isinstance(patch[name], str) or not patch[name].strip()):
            raise ValidationError(f"'{to_camel(name)}' must be a non-empty string")

    storage = get_storage()
    with storage.transaction():
        current = found(storage.get_ticket(ticket_id), "Ticket")
        if "status" in patch:
            check_transition(current.status, patch["status"])
        ticket = storage.update_ticket(ticket_id, patch)

    if "status" in patch and patch["status"] != current.status:
        logger.info(f"Ticket #{ticket.ticket_number} {current.status} -> {ticket.status}")
    return render(ticket)


@tickets_bp.route("/<ticket_id>", methods=["DELETE"])
def delete_ticket(ticket_id: str):
    if not get_storage().delete_ticket(ticket_id):
        found(None, "Ticket")
    return "", 204


@tickets_bp.route("/<ticket_id>/messages", methods=["GET"])
def list_messages(ticket_id: str):
    return render_list(get_storage().list_messages(ticket_id))


@tickets_bp.route("/<ticket_id>/messages", methods=["POST"])
def create_message(ticket_id: str):
    storage = get_storage()
    ticket = found(storage.get_ticket(ticket_id), "Ticket")
    data = validate_message(json_body())
    if ticket.status == TicketStatus.CLOSED.value and data["sender"] == MessageSender.USER.value:
        raise BusinessRuleError("Ticket is closed")
    message = storage.create_message(ticket_id, data["content"], data["sender"])
    return render(message, 201)


@tickets_bp.route("/<ticket_id>/ai-response", methods=["POST"])
def create_auto_reply(ticket_id: str):
    """Append a canned staff reply picked from the ticket text."""
    storage = get_storage()
    ticket = found(storage.get_ticket(ticket_id), "Ticket")
    if storage.get_ai_enabled():
        content = generate_reply(f"{ticket.subject} {ticket.message}")
    else:
        content = acknowledgement(ticket.subject)
    message = storage.create_message(ticket_id, content, MessageSender.STAFF.value)
    return jsonify(message.to_dict())
