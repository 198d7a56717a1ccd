"""Discord webhook notifier for staff-facing events."""

from __future__ import annotations

import asyncio
from concurrent.futures import Future
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional

import aiohttp

from core import get_logger, WebhookDefaults, WebhookEvent
from core.exceptions import WebhookError
from services.async_runner import submit_coroutine

if TYPE_CHECKING:
    from config import Config

logger = get_logger(__name__)


def _embed_color(hex_color: str) -> int:
    """Parse ``#RRGGBB`` into the integer Discord expects."""
    try:
        return int(hex_color.lstrip("#"), 16)
    except (AttributeError, ValueError):
        return WebhookDefaults.FALLBACK_COLOR


def _field(name: str, value: Any, inline: bool = True) -> Dict[str, Any]:
    return {"name": name, "value": str(value), "inline": inline}


class WebhookNotifier:
    """Formats portal events as Discord embeds and posts them.

    ``notify`` never blocks the caller: delivery is scheduled on the main
    asyncio loop and every failure is logged, never raised.
    """

    def __init__(
        self,
        urls: Mapping[str, str],
        staff_mention: str = "",
        timeout: float = WebhookDefaults.TIMEOUT,
        retry_attempts: int = 2,
        submit: Callable[..., Future] = submit_coroutine,
    ) -> None:
        """Initialize notifier.

        Args:
            urls: Webhook URL per ``WebhookEvent`` value; empty URLs disable the event
            staff_mention: Role mention prepended to staff-facing embeds
            timeout: Total HTTP timeout per attempt in seconds
            retry_attempts: Attempts per delivery
            submit: Schedules a coroutine on the running loop
        """
        self.urls = dict(urls)
        self.staff_mention = staff_mention
        self.timeout = timeout
        self.retry_attempts = max(1, retry_attempts)
        self._submit = submit

    @classmethod
    def from_config(cls, config: Config) -> "WebhookNotifier":
        return cls(
            urls={
                WebhookEvent.GANG_CREATED.value: config.webhook_gang_created,
                WebhookEvent.TICKET_CREATED.value: config.webhook_ticket_created,
                WebhookEvent.USER_LOGIN.value: config.webhook_user_login,
                WebhookEvent.USER_BLOCKED.value: config.webhook_user_blocked,
            },
            staff_mention=config.staff_role_mention,
            timeout=config.webhook_timeout,
        )

    # ------------------------------------------------------------------
    # formatting

    def build_payload(self, event: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Build the webhook body for an event.

        Raises:
            ValueError: If the event is unknown
        """
        event = WebhookEvent(event)
        timestamp = datetime.now(timezone.utc).isoformat()
        content: Optional[str] = None

        if event is WebhookEvent.GANG_CREATED:
            embed = {
                "title": "🏴 New Gang Created",
                "color": _embed_color(data.get("color", "")),
                "fields": [
                    _field("Gang Name", data.get("name", "")),
                    _field("Owner", data.get("ownerName", "")),
                    _field("Owner ID", data.get("owner", "")),
                    _field("Color", data.get("color", "")),
                ],
            }
        elif event is WebhookEvent.TICKET_CREATED:
            content = self.staff_mention
            message = str(data.get("message", ""))[:WebhookDefaults.MESSAGE_FIELD_LIMIT]
            embed = {
                "title": "🎫 New Support Ticket",
                "color": WebhookDefaults.TICKET_COLOR,
                "fields": [
                    _field("Ticket Number", f"#{data.get('ticketNumber', '')}"),
                    _field("Created By", data.get("userId", "")),
                    _field("Subject", data.get("subject", ""), inline=False),
                    _field("Message", message, inline=False),
                ],
            }
        elif event is WebhookEvent.USER_LOGIN:
            embed = {
                "title": "✅ User Logged In",
                "color": WebhookDefaults.LOGIN_COLOR,
                "fields": [
                    _field("Username", data.get("username", "")),
                    _field("User ID", data.get("userId", "")),
                    _field("Staff Access", "Yes" if data.get("isStaff") else "No"),
                ],
            }
        else:
            content = self.staff_mention
            embed = {
                "title": "🔒 User Blocked",
                "color": WebhookDefaults.BLOCKED_COLOR,
                "fields": [
                    _field("User ID", data.get("userId", "")),
                    _field("Blocked By", data.get("blockedBy", "Staff")),
                ],
            }

        embed["timestamp"] = timestamp
        payload: Dict[str, Any] = {"embeds": [embed]}
        if content:
            payload["content"] = content
        return payload

    # ------------------------------------------------------------------
    # delivery

    async def deliver(self, url: str, payload: Dict[str, Any]) -> bool:
        """POST a payload with retries.

        Returns:
            True if Discord accepted the webhook
        """
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        for attempt in range(self.retry_attempts):
            try:
                async with aiohttp.ClientSession(timeout=timeout) as session:
                    async with session.post(url, json=payload) as response:
                        if response.status >= 400:
                            body = await response.text()
                            raise WebhookError(f"HTTP {response.status}: {body[:200]}")
                return True
            except (aiohttp.ClientError, asyncio.TimeoutError, WebhookError) as e:
                if attempt < self.retry_attempts - 1:
                    delay = 2 ** attempt
                    logger.warning(
                        f"Webhook delivery failed, attempt {attempt + 1}/{self.retry_attempts}. "
                        f"Retrying in {delay}s. Error: {e}"
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.error(f"Webhook delivery failed after {self.retry_attempts} attempts: {e}")
        return False

    def notify(self, event: str, data: Mapping[str, Any]) -> Optional[Future]:
        """Schedule delivery of an event without waiting for it.

        Returns:
            The scheduled future, or None when nothing was sent
        """
        url = self.urls.get(WebhookEvent(event).value)
        if not url:
            logger.debug(f"No webhook configured for {event}")
            return None

        payload = self.build_payload(event, data)
        coro = self.deliver(url, payload)
        try:
            future = self._submit(coro)
        except RuntimeError as e:
            coro.close()
            logger.warning(f"Webhook {event} skipped: {e}")
            return None

        def _log_outcome(done: Future) -> None:
            if done.cancelled():
                logger.warning(f"Webhook {event} cancelled")
            elif done.exception() is not None:
                logger.error(f"Webhook {event} crashed: {done.exception()}")

        future.add_done_callback(_log_outcome)
        return future
