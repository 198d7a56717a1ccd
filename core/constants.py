"""Application-wide constants and configuration values."""

from __future__ import annotations

from enum import Enum


# Status enums
class TicketStatus(str, Enum):
    """Support ticket status."""
    OPEN = "open"
    CLAIMED = "claimed"
    CLOSED = "closed"


class MessageSender(str, Enum):
    """Author side of a ticket message."""
    USER = "user"
    STAFF = "staff"


class GiveawayStatus(str, Enum):
    """Giveaway lifecycle status."""
    ACTIVE = "active"
    ENDED = "ended"


class ShopCategory(str, Enum):
    """Shop product categories."""
    TURFS = "Turfs"
    SPAWNERS = "Spawners"
    COSMETICS = "Cosmetics"


class NotificationType(str, Enum):
    """Notification feed entry types."""
    TICKET_NEW = "ticket_new"
    GANG_NEW = "gang_new"
    GIVEAWAY_NEW = "giveaway_new"
    GIVEAWAY_WIN = "giveaway_win"
    ANNOUNCEMENT_NEW = "announcement_new"
    SHOP_PRODUCT_NEW = "shop_product_new"
    UPDATE = "update"


class WebhookEvent(str, Enum):
    """Events forwarded to the Discord webhooks."""
    GANG_CREATED = "gang_created"
    TICKET_CREATED = "ticket_created"
    USER_LOGIN = "user_login"
    USER_BLOCKED = "user_blocked"


# Ticket constants
class TicketDefaults:
    """Ticket creation defaults."""
    NUMBER_MIN = 10000
    NUMBER_MAX = 99999
    ACK_MESSAGE = "A supporter is coming to you in a short amount of time!"
    NOTIFICATION_PREVIEW = 100  # characters of the message in the feed


# Gang constants
class GangDefaults:
    """Gang creation defaults."""
    DEFAULT_RANKS = ("Member", "Officer")
    JOIN_RANK = "Member"


# Giveaway constants
class GiveawayDefaults:
    """Duration parsing configuration."""
    DURATION_PATTERN = r"(\d+)([mhdw])"
    DEFAULT_DURATION_MS = 60 * 1000
    UNIT_MS = {
        "m": 60 * 1000,
        "h": 60 * 60 * 1000,
        "d": 24 * 60 * 60 * 1000,
        "w": 7 * 24 * 60 * 60 * 1000,
    }


# Webhook constants
class WebhookDefaults:
    """Discord embed configuration."""
    TICKET_COLOR = 0xFF6B6B
    LOGIN_COLOR = 0x5865F2
    BLOCKED_COLOR = 0xFF0000
    FALLBACK_COLOR = 0x2F3136
    MESSAGE_FIELD_LIMIT = 1000
    TIMEOUT = 10  # seconds


class RequestDefaults:
    """Request handling thresholds."""
    SLOW_REQUEST_SECONDS = 1.0
