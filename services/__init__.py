"""Services package."""

from .async_runner import set_main_loop, get_main_loop, run_coroutine_sync, submit_coroutine
from .auto_reply import generate_reply, acknowledgement
from .discord_oauth import DiscordOAuthClient, DiscordIdentity, display_name
from .staff import StaffDirectory
from .webhooks import WebhookNotifier

__all__ = [
    "set_main_loop",
    "get_main_loop",
    "run_coroutine_sync",
    "submit_coroutine",
    "generate_reply",
    "acknowledgement",
    "DiscordOAuthClient",
    "DiscordIdentity",
    "display_name",
    "StaffDirectory",
    "WebhookNotifier",
]
