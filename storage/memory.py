"""In-memory entity store.

The store is the only writer of portal state. Every public method runs under
one re-entrant lock and hands back deep copies, so callers never hold a
reference into the collections. State lives for the lifetime of the process.
"""

from __future__ import annotations

import copy
import random
import threading
import time
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, TypeVar

from core import (
    get_logger,
    GangDefaults,
    GiveawayStatus,
    TicketDefaults,
    TicketStatus,
)
from storage.lottery import draw_winners, parse_duration
from storage.models import (
    Announcement,
    Entity,
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
)

logger = get_logger(__name__)

E = TypeVar("E", bound=Entity)


def _uuid() -> str:
    return str(uuid.uuid4())


def _now_ms() -> int:
    return int(time.time() * 1000)


class MemoryStorage:
    """Process-local store for every portal collection.

    Args:
        clock: Returns the current time in epoch milliseconds
        rng: Random source for ticket numbers and giveaway draws
    """

    COLLECTIONS = (
        "tickets",
        "messages",
        "gangs",
        "giveaways",
        "announcements",
        "shop_products",
        "notifications",
        "users",
        "notes",
    )

    def __init__(
        self,
        clock: Callable[[], int] = _now_ms,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._clock = clock
        self._rng = rng or random.Random()
        self._lock = threading.RLock()
        self._tickets: Dict[str, Ticket] = {}
        self._messages: Dict[str, Message] = {}
        self._gangs: Dict[str, Gang] = {}
        self._giveaways: Dict[str, Giveaway] = {}
        self._announcements: Dict[str, Announcement] = {}
        self._shop_products: Dict[str, ShopProduct] = {}
        self._notifications: Dict[str, Notification] = {}
        self._users: Dict[str, User] = {}
        self._notes: Dict[str, Note] = {}
        self._ai_enabled = True

    # ------------------------------------------------------------------
    # helpers

    def now(self) -> int:
        return self._clock()

    @contextmanager
    def transaction(self) -> Iterator["MemoryStorage"]:
        """Hold the store lock across a sequence of operations."""
        with self._lock:
            yield self

    @staticmethod
    def _newest_first(items: Mapping[str, E]) -> List[E]:
        # dicts keep insertion order; reversing first makes equal timestamps
        # list the later insert first
        ordered = list(reversed(list(items.values())))
        ordered.sort(key=lambda e: e.created_at, reverse=True)
        return copy.deepcopy(ordered)

    @staticmethod
    def _patch(entity: E, updates: Mapping[str, Any]) -> E:
        allowed = entity.mutable_fields()
        for key, value in updates.items():
            if key in allowed:
                setattr(entity, key, value)
        return entity

    def _update(self, collection: Dict[str, E], entity_id: str, updates: Mapping[str, Any]) -> Optional[E]:
        with self._lock:
            entity = collection.get(entity_id)
            if entity is None:
                return None
            self._patch(entity, updates)
            return copy.deepcopy(entity)

    def _get(self, collection: Dict[str, E], entity_id: str) -> Optional[E]:
        with self._lock:
            entity = collection.get(entity_id)
            return copy.deepcopy(entity) if entity is not None else None

    def _delete(self, collection: Dict[str, Any], entity_id: str) -> bool:
        with self._lock:
            return collection.pop(entity_id, None) is not None

    def _insert(self, collection: Dict[str, E], entity: E) -> E:
        with self._lock:
            collection[entity.id] = entity
            return copy.deepcopy(entity)

    # ------------------------------------------------------------------
    # tickets

    def list_tickets(self) -> List[Ticket]:
        with self._lock:
            return self._newest_first(self._tickets)

    def get_ticket(self, ticket_id: str) -> Optional[Ticket]:
        return self._get(self._tickets, ticket_id)

    def create_ticket(self, subject: str, message: str, user_id: str) -> Ticket:
        with self._lock:
            number = self._rng.randint(TicketDefaults.NUMBER_MIN, TicketDefaults.NUMBER_MAX)
            ticket = Ticket(
                id=_uuid(),
                ticket_number=str(number),
                subject=subject,
                message=message,
                user_id=user_id,
                status=TicketStatus.OPEN.value,
                created_at=self.now(),
            )
            logger.info(f"Ticket #{ticket.ticket_number} created by {user_id}")
            return self._insert(self._tickets, ticket)

    def update_ticket(self, ticket_id: str, updates: Mapping[str, Any]) -> Optional[Ticket]:
        return self._update(self._tickets, ticket_id, updates)

    def delete_ticket(self, ticket_id: str) -> bool:
        """Delete a ticket together with its message thread."""
        with self._lock:
            if not self._delete(self._tickets, ticket_id):
                return False
            thread = [mid for mid, m in self._messages.items() if m.ticket_id == ticket_id]
            for message_id in thread:
                del self._messages[message_id]
            return True

    # ------------------------------------------------------------------
    # messages

    def list_messages(self, ticket_id: str) -> List[Message]:
        with self._lock:
            thread = [m for m in self._messages.values() if m.ticket_id == ticket_id]
            thread.sort(key=lambda m: m.timestamp)
            return copy.deepcopy(thread)

    def create_message(self, ticket_id: str, content: str, sender: str) -> Message:
        message = Message(
            id=_uuid(),
            ticket_id=ticket_id,
            content=content,
            sender=sender,
            timestamp=self.now(),
        )
        return self._insert(self._messages, message)

    # ------------------------------------------------------------------
    # gangs

    def list_gangs(self) -> List[Gang]:
        with self._lock:
            return self._newest_first(self._gangs)

    def get_gang(self, gang_id: str) -> Optional[Gang]:
        return self._get(self._gangs, gang_id)

    def create_gang(self, name: str, owner: str, owner_name: str, password: str, color: str) -> Gang:
        gang_id = _uuid()
        gang = Gang(
            id=gang_id,
            name=name,
            owner=owner,
            owner_name=owner_name,
            password=password,
            color=color,
            created_at=self.now(),
            ranks=[GangRank(id=_uuid(), name=rank, gang_id=gang_id) for rank in GangDefaults.DEFAULT_RANKS],
        )
        logger.info(f"Gang '{name}' created by {owner_name}")
        return self._insert(self._gangs, gang)

    def update_gang(self, gang_id: str, updates: Mapping[str, Any]) -> Optional[Gang]:
        return self._update(self._gangs, gang_id, updates)

    def delete_gang(self, gang_id: str) -> bool:
        return self._delete(self._gangs, gang_id)

    def add_gang_member(self, gang_id: str, member: GangMember) -> Optional[Gang]:
        """Append a member record; the one-gang-per-user rule is the caller's."""
        with self._lock:
            gang = self._gangs.get(gang_id)
            if gang is None:
                return None
            member = copy.deepcopy(member)
            member.gang_id = gang_id
            gang.members.append(member)
            return copy.deepcopy(gang)

    def remove_gang_member(self, gang_id: str, member_id: str) -> Optional[Gang]:
        """Drop a member by id. Unknown member ids leave the gang unchanged."""
        with self._lock:
            gang = self._gangs.get(gang_id)
            if gang is None:
                return None
            gang.members = [m for m in gang.members if m.id != member_id]
            return copy.deepcopy(gang)

    # ------------------------------------------------------------------
    # giveaways

    def list_giveaways(self) -> List[Giveaway]:
        """Return giveaways newest first, ending any that have run out."""
        with self._lock:
            self.expire_giveaways()
            return self._newest_first(self._giveaways)

    def get_giveaway(self, giveaway_id: str) -> Optional[Giveaway]:
        return self._get(self._giveaways, giveaway_id)

    def create_giveaway(self, price: float, duration: str, description: str, winners_count: int) -> Giveaway:
        now = self.now()
        giveaway = Giveaway(
            id=_uuid(),
            price=price,
            duration=duration,
            description=description,
            created_at=now,
            ends_at=now + parse_duration(duration),
            winners_count=winners_count,
        )
        logger.info(f"Giveaway {giveaway.id} created, ends at {giveaway.ends_at}")
        return self._insert(self._giveaways, giveaway)

    def delete_giveaway(self, giveaway_id: str) -> bool:
        return self._delete(self._giveaways, giveaway_id)

    def join_giveaway(self, giveaway_id: str, username: str) -> Optional[Giveaway]:
        with self._lock:
            giveaway = self._giveaways.get(giveaway_id)
            if giveaway is None:
                return None
            if username not in giveaway.participants:
                giveaway.participants.append(username)
            return copy.deepcopy(giveaway)

    def leave_giveaway(self, giveaway_id: str, username: str) -> Optional[Giveaway]:
        with self._lock:
            giveaway = self._giveaways.get(giveaway_id)
            if giveaway is None:
                return None
            giveaway.participants = [p for p in giveaway.participants if p != username]
            return copy.deepcopy(giveaway)

    def end_giveaway(self, giveaway_id: str) -> Optional[Giveaway]:
        """End a giveaway and draw its winners.

        Winners are fixed by the first call; ending an ended giveaway returns
        it untouched.
        """
        with self._lock:
            giveaway = self._giveaways.get(giveaway_id)
            if giveaway is None:
                return None
            if giveaway.status != GiveawayStatus.ENDED.value:
                giveaway.status = GiveawayStatus.ENDED.value
                giveaway.winners = draw_winners(giveaway.participants, giveaway.winners_count, self._rng)
                logger.info(f"Giveaway {giveaway_id} ended with winners {giveaway.winners}")
            return copy.deepcopy(giveaway)

    def expire_giveaways(self) -> List[Giveaway]:
        """End every active giveaway whose deadline has passed."""
        with self._lock:
            now = self.now()
            due = [
                g.id for g in self._giveaways.values()
                if g.status == GiveawayStatus.ACTIVE.value and now > g.ends_at
            ]
            return [self.end_giveaway(giveaway_id) for giveaway_id in due]

    # ------------------------------------------------------------------
    # announcements

    def list_announcements(self) -> List[Announcement]:
        with self._lock:
            return self._newest_first(self._announcements)

    def get_announcement(self, announcement_id: str) -> Optional[Announcement]:
        return self._get(self._announcements, announcement_id)

    def create_announcement(self, title: str, user: str, description: str) -> Announcement:
        announcement = Announcement(
            id=_uuid(),
            title=title,
            user=user,
            description=description,
            created_at=self.now(),
        )
        return self._insert(self._announcements, announcement)

    def delete_announcement(self, announcement_id: str) -> bool:
        return self._delete(self._announcements, announcement_id)

    # ------------------------------------------------------------------
    # shop products

    def list_shop_products(self) -> List[ShopProduct]:
        with self._lock:
            return self._newest_first(self._shop_products)

    def get_shop_product(self, product_id: str) -> Optional[ShopProduct]:
        return self._get(self._shop_products, product_id)

    def create_shop_product(self, name: str, link: str, price: float, category: str) -> ShopProduct:
        product = ShopProduct(
            id=_uuid(),
            name=name,
            link=link,
            price=price,
            category=category,
            created_at=self.now(),
        )
        return self._insert(self._shop_products, product)

    def update_shop_product(self, product_id: str, updates: Mapping[str, Any]) -> Optional[ShopProduct]:
        return self._update(self._shop_products, product_id, updates)

    def delete_shop_product(self, product_id: str) -> bool:
        return self._delete(self._shop_products, product_id)

    # ------------------------------------------------------------------
    # notifications

    def list_notifications(self) -> List[Notification]:
        with self._lock:
            return self._newest_first(self._notifications)

    def create_notification(self, type: str, title: str, description: str) -> Notification:
        notification = Notification(
            id=_uuid(),
            type=type,
            title=title,
            description=description,
            created_at=self.now(),
        )
        return self._insert(self._notifications, notification)

    def mark_notification_read(self, notification_id: str) -> Optional[Notification]:
        return self._update(self._notifications, notification_id, {"read": True})

    # ------------------------------------------------------------------
    # users

    def list_users(self) -> List[User]:
        with self._lock:
            return self._newest_first(self._users)

    def get_user(self, user_pk: str) -> Optional[User]:
        return self._get(self._users, user_pk)

    def get_user_by_user_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            user = next((u for u in self._users.values() if u.user_id == user_id), None)
            return copy.deepcopy(user) if user is not None else None

    def create_user(self, user_id: str, is_blocked: bool = False) -> User:
        user = User(id=_uuid(), user_id=user_id, is_blocked=is_blocked, created_at=self.now())
        return self._insert(self._users, user)

    def update_user(self, user_pk: str, updates: Mapping[str, Any]) -> Optional[User]:
        return self._update(self._users, user_pk, updates)

    def block_user(self, user_pk: str) -> Optional[User]:
        user = self.update_user(user_pk, {"is_blocked": True})
        if user is not None:
            logger.info(f"User {user.user_id} blocked")
        return user

    def unblock_user(self, user_pk: str) -> Optional[User]:
        return self.update_user(user_pk, {"is_blocked": False})

    # ------------------------------------------------------------------
    # notes

    def list_notes(self) -> List[Note]:
        with self._lock:
            return self._newest_first(self._notes)

    def create_note(self, title: str, description: str, created_by: str = "") -> Note:
        note = Note(
            id=_uuid(),
            title=title,
            description=description,
            created_at=self.now(),
            created_by=created_by,
        )
        return self._insert(self._notes, note)

    def delete_note(self, note_id: str) -> bool:
        return self._delete(self._notes, note_id)

    # ------------------------------------------------------------------
    # settings

    def get_ai_enabled(self) -> bool:
        return self._ai_enabled

    def set_ai_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._ai_enabled = bool(enabled)

    # ------------------------------------------------------------------
    # maintenance

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {name: len(getattr(self, f"_{name}")) for name in self.COLLECTIONS}

    def clear(self) -> None:
        """Drop every collection and restore default settings."""
        with self._lock:
            for name in self.COLLECTIONS:
                getattr(self, f"_{name}").clear()
            self._ai_enabled = True
        logger.warning("Storage cleared")
