"""Static staff allow-list lookup."""

from __future__ import annotations

from typing import Iterable


class StaffDirectory:
    """Answers whether a Discord user id belongs to staff."""

    def __init__(self, user_ids: Iterable[str]) -> None:
        self._user_ids = frozenset(str(uid).strip() for uid in user_ids if str(uid).strip())

    def is_staff(self, user_id: object) -> bool:
        if user_id is None:
            return False
        return str(user_id).strip() in self._user_ids
