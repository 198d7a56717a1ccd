"""Giveaway timing and winner selection."""

from __future__ import annotations

import random
import re
from typing import List, Sequence

from core import get_logger, GiveawayDefaults

logger = get_logger(__name__)

_DURATION_RE = re.compile(GiveawayDefaults.DURATION_PATTERN, re.ASCII)


def parse_duration(duration: str) -> int:
    """Convert a duration token such as ``"1h"`` or ``"3d"`` to milliseconds.

    Tokens are ASCII digits followed by one of ``m``, ``h``, ``d`` or ``w``.
    Anything else falls back to one minute rather than failing.
    """
    match = _DURATION_RE.fullmatch(duration) if isinstance(duration, str) else None
    if not match:
        logger.debug(f"Unrecognized giveaway duration {duration!r}, using default")
        return GiveawayDefaults.DEFAULT_DURATION_MS
    value, unit = match.groups()
    return int(value) * GiveawayDefaults.UNIT_MS[unit]


def draw_winners(
    participants: Sequence[str],
    winners_count: int,
    rng: random.Random,
) -> List[str]:
    """Draw ``min(winners_count, len(participants))`` winners.

    Each slot is an independent uniform pick over the full participant list,
    so the same participant can win more than one slot.

    Args:
        participants: Usernames entered in the giveaway
        winners_count: Number of winner slots configured on the giveaway
        rng: Random source

    Returns:
        Winner usernames in draw order
    """
    pool = list(participants)
    slots = min(winners_count, len(pool))
    winners = [pool[int(rng.random() * len(pool))] for _ in range(slots)]
    logger.info(f"Drew {len(winners)} winners from {len(pool)} participants")
    return winners
