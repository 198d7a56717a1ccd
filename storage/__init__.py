"""Storage package public API."""

from .memory import MemoryStorage
from .lottery import draw_winners, parse_duration
from .models import (
    Announcement,
    Gang,
    GangMember,
    GangRank,
    Giveaway,
    Message,
    Note,
    Notification,
    ShopProduct,
    Ticket,
    User,
    to_camel,
    to_snake,
)

__all__ = [
    "MemoryStorage",
    "draw_winners",
    "parse_duration",
    "Announcement",
    "Gang",
    "GangMember",
    "GangRank",
    "Giveaway",
    "Message",
    "Note",
    "Notification",
    "ShopProduct",
    "Ticket",
    "User",
    "to_camel",
    "to_snake",
]
