"""Discord OAuth2 client used by the login flow."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

import aiohttp

from core import get_logger
from core.exceptions import OAuthError

if TYPE_CHECKING:
    from config import Config

logger = get_logger(__name__)


@dataclass
class DiscordIdentity:
    """Profile of a user who completed the OAuth exchange."""
    user_id: str
    username: str
    access_token: str
    in_guild: bool


def display_name(profile: Dict[str, Any]) -> str:
    """Pick the name shown for a Discord profile.

    Legacy accounts keep ``name#1234``; migrated accounts report
    discriminator ``"0"`` and are shown by global name.
    """
    discriminator = profile.get("discriminator")
    if discriminator and discriminator != "0":
        return f"{profile.get('username')}#{discriminator}"
    return profile.get("global_name") or profile.get("username") or ""


class DiscordOAuthClient:
    """Authorization-code exchange plus profile and guild lookups."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        guild_id: str,
        api_base: str = "https://discord.com/api",
        timeout: float = 10.0,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.guild_id = guild_id
        self.api_base = api_base.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    @classmethod
    def from_config(cls, config: Config) -> "DiscordOAuthClient":
        return cls(
            client_id=config.discord_client_id,
            client_secret=config.discord_client_secret,
            guild_id=config.discord_guild_id,
            api_base=config.discord_api_base,
        )

    async def exchange_code(self, session: aiohttp.ClientSession, code: str, redirect_uri: str) -> str:
        """Trade an authorization code for an access token.

        Raises:
            OAuthError: If Discord rejects the code
        """
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri or "",
        }
        async with session.post(f"{self.api_base}/oauth2/token", data=data) as response:
            token_data = await response.json(content_type=None)
        if not isinstance(token_data, dict) or token_data.get("error") or not token_data.get("access_token"):
            detail = "invalid response"
            if isinstance(token_data, dict):
                detail = token_data.get("error_description") or token_data.get("error") or detail
            raise OAuthError(f"Discord OAuth error: {detail}", status_code=400)
        return token_data["access_token"]

    async def fetch_profile(self, session: aiohttp.ClientSession, access_token: str) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {access_token}"}
        async with session.get(f"{self.api_base}/users/@me", headers=headers) as response:
            profile = await response.json(content_type=None)
        if not isinstance(profile, dict) or not profile.get("id"):
            raise OAuthError("Failed to get Discord user information", status_code=400)
        return profile

    async def fetch_guild_member(self, session: aiohttp.ClientSession, access_token: str) -> Optional[Dict[str, Any]]:
        """Return the guild member record, or None if the user is not a member."""
        headers = {"Authorization": f"Bearer {access_token}"}
        url = f"{self.api_base}/users/@me/guilds/{self.guild_id}/member"
        try:
            async with session.get(url, headers=headers) as response:
                if response.status != 200:
                    return None
                return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Guild membership lookup failed: {e}")
            return None

    async def authenticate(self, code: str, redirect_uri: str = "") -> DiscordIdentity:
        """Run the full login exchange.

        Raises:
            OAuthError: On rejected codes or transport failures
        """
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                access_token = await self.exchange_code(session, code, redirect_uri)
                profile = await self.fetch_profile(session, access_token)
                member = await self.fetch_guild_member(session, access_token)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Discord OAuth transport error: {e}")
            raise OAuthError("Failed to authenticate with Discord", status_code=502) from e

        return DiscordIdentity(
            user_id=str(profile["id"]),
            username=display_name(profile),
            access_token=access_token,
            in_guild=member is not None,
        )
