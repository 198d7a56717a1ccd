"""Entity models held by the in-memory store.

Attributes are snake_case; ``to_dict`` renders the camelCase shape the web
clients consume.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional


_CAMEL_RE = re.compile(r"_([a-z])")
_SNAKE_RE = re.compile(r"(?<!^)(?=[A-Z])")


def to_camel(name: str) -> str:
    return _CAMEL_RE.sub(lambda m: m.group(1).upper(), name)


def to_snake(name: str) -> str:
    return _SNAKE_RE.sub("_", name).lower()


class Entity:
    """Serialization helpers shared by all stored entities."""

    __slots__ = ()

    # Fields a partial update may never touch
    IMMUTABLE_FIELDS: frozenset = frozenset({"id", "created_at"})

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "claimed_by" and value is None:
                continue
            if isinstance(value, list):
                value = [v.to_dict() if isinstance(v, Entity) else v for v in value]
            data[to_camel(f.name)] = value
        return data

    @classmethod
    def mutable_fields(cls) -> frozenset:
        return frozenset(f.name for f in fields(cls)) - cls.IMMUTABLE_FIELDS


@dataclass(slots=True)
class Ticket(Entity):
    id: str
    ticket_number: str
    subject: str
    message: str
    user_id: str
    status: str
    created_at: int
    claimed_by: Optional[str] = None

    IMMUTABLE_FIELDS = frozenset({"id", "ticket_number", "created_at"})


@dataclass(slots=True)
class Message(Entity):
    id: str
    ticket_id: str
    content: str
    sender: str
    timestamp: int

    IMMUTABLE_FIELDS = frozenset({"id", "ticket_id", "timestamp"})


@dataclass(slots=True)
class GangRank(Entity):
    id: str
    name: str
    gang_id: str


@dataclass(slots=True)
class GangMember(Entity):
    id: str
    username: str
    gang_id: str
    rank: str
    joined_at: int
    is_online: bool


@dataclass(slots=True)
class Gang(Entity):
    id: str
    name: str
    owner: str
    owner_name: str
    password: str
    color: str
    created_at: int
    members: List[GangMember] = field(default_factory=list)
    ranks: List[GangRank] = field(default_factory=list)

    # Roster changes go through add/remove member only
    IMMUTABLE_FIELDS = frozenset({"id", "created_at", "members", "ranks"})

    def find_member(self, username: str) -> Optional[GangMember]:
        return next((m for m in self.members if m.username == username), None)


@dataclass(slots=True)
class Giveaway(Entity):
    id: str
    price: float
    duration: str
    description: str
    created_at: int
    ends_at: int
    winners_count: int
    winners: List[str] = field(default_factory=list)
    participants: List[str] = field(default_factory=list)
    status: str = "active"


@dataclass(slots=True)
class Announcement(Entity):
    id: str
    title: str
    user: str
    description: str
    created_at: int


@dataclass(slots=True)
class ShopProduct(Entity):
    id: str
    name: str
    link: str
    price: float
    category: str
    created_at: int


@dataclass(slots=True)
class Notification(Entity):
    id: str
    type: str
    title: str
    description: str
    created_at: int
    read: bool = False


@dataclass(slots=True)
class User(Entity):
    id: str
    user_id: str
    is_blocked: bool
    created_at: int


@dataclass(slots=True)
class Note(Entity):
    id: str
    title: str
    description: str
    created_at: int
    created_by: str = ""
