"""Steam Web API client.

Implements `domain.gateways.SteamGateway` on top of an aiohttp session.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

import aiohttp

from domain.gateways import VanityLookupResult
from domain.models import PlayerBans, PlayerSummary, ResolutionFailure


logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.steampowered.com"
RESOLVE_VANITY_URL = f"{API_BASE_URL}/ISteamUser/ResolveVanityURL/v1/"
PLAYER_SUMMARIES_URL = f"{API_BASE_URL}/ISteamUser/GetPlayerSummaries/v2/"
PLAYER_BANS_URL = f"{API_BASE_URL}/ISteamUser/GetPlayerBans/v1/"
FRIEND_LIST_URL = f"{API_BASE_URL}/ISteamUser/GetFriendList/v1/"
OWNED_GAMES_URL = f"{API_BASE_URL}/IPlayerService/GetOwnedGames/v1/"

CS2_APP_ID = 730
DEFAULT_TIMEOUT_SECONDS = 10.0


class SteamWebApiClient:
    """
    Thin async wrapper around the Steam Web API endpoints used by the bot.

    The HTTP session is created on first use unless one is passed in, and is
    owned by the client only in the former case.
    """

    def __init__(
        self,
        api_key: str,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._api_key = api_key
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
        self._session = None

    async def _get_json(self, url: str, params: Dict[str, Any]) -> Optional[dict]:
        """
        GET `url` and decode the JSON body.

        Returns None on a non-200 status. Transport errors propagate as
        `aiohttp.ClientError` or `asyncio.TimeoutError`.
        """

        query = {"key": self._api_key, **params}
        async with self._get_session().get(url, params=query) as resp:
            if resp.status != 200:
                logger.warning("Steam API %s returned HTTP %s", url, resp.status)
                return None
            return await resp.json(content_type=None)

    async def _get_json_or_none(
        self, url: str, params: Dict[str, Any]
    ) -> Optional[dict]:
        try:
            body = await self._get_json(url, params)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.warning("Steam API request to %s failed: %r", url, exc)
            return None
        return body if isinstance(body, dict) else None

    async def resolve_vanity(self, handle: str) -> VanityLookupResult:
        try:
            body = await self._get_json(RESOLVE_VANITY_URL, {"vanityurl": handle})
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.warning("Vanity lookup for %r failed: %r", handle, exc)
            body = None

        if body is None:
            return VanityLookupResult(
                success=False,
                failure=ResolutionFailure.UPSTREAM_UNAVAILABLE,
                error_message="Failed to resolve vanity URL",
            )

        response = _as_dict(_as_dict(body).get("response"))
        steam64 = response.get("steamid")
        if response.get("success") != 1 or not steam64:
            return VanityLookupResult(
                success=False,
                failure=ResolutionFailure.HANDLE_NOT_FOUND,
                error_message="Could not resolve vanity to steamid64",
            )

        return VanityLookupResult(success=True, steam64=str(steam64))

    async def get_player_summary(self, steam64: str) -> Optional[PlayerSummary]:
        body = await self._get_json_or_none(
            PLAYER_SUMMARIES_URL, {"steamids": steam64}
        )
        if body is None:
            return None

        players = _as_list(_as_dict(body.get("response")).get("players"))
        if not players or not isinstance(players[0], dict):
            return None

        player = players[0]
        return PlayerSummary(
            steam_id=str(player.get("steamid") or steam64),
            persona_name=player.get("personaname"),
            profile_url=player.get("profileurl"),
            avatar_url=player.get("avatarfull") or player.get("avatar"),
            real_name=player.get("realname"),
            country_code=player.get("loccountrycode"),
            time_created=_as_number(player.get("timecreated")),
            visibility_state=_as_number(player.get("communityvisibilitystate")),
            persona_state=_as_number(player.get("personastate")),
            last_logoff=_as_number(player.get("lastlogoff")),
        )

    async def get_player_bans(self, steam64: str) -> Optional[PlayerBans]:
        body = await self._get_json_or_none(PLAYER_BANS_URL, {"steamids": steam64})
        if body is None:
            return None

        players = _as_list(body.get("players"))
        if not players or not isinstance(players[0], dict):
            return None

        player = players[0]
        return PlayerBans(
            vac_banned=bool(player.get("VACBanned")),
            vac_ban_count=int(_as_number(player.get("NumberOfVACBans")) or 0),
            community_banned=bool(player.get("CommunityBanned")),
            economy_ban=str(player.get("EconomyBan") or "none"),
        )

    async def get_friend_count(self, steam64: str) -> Optional[int]:
        body = await self._get_json_or_none(FRIEND_LIST_URL, {"steamid": steam64})
        if body is None:
            return None

        friends = _as_dict(body.get("friendslist")).get("friends")
        if not isinstance(friends, list):
            return None
        return len(friends)

    async def get_cs2_hours(self, steam64: str) -> Optional[float]:
        body = await self._get_json_or_none(
            OWNED_GAMES_URL,
            {
                "steamid": steam64,
                "include_appinfo": 1,
                "include_played_free_games": 1,
            },
        )
        if body is None:
            return None

        games = _as_list(_as_dict(body.get("response")).get("games"))
        cs2 = next(
            (g for g in games if isinstance(g, dict) and g.get("appid") == CS2_APP_ID),
            None,
        )
        if cs2 is None:
            return None

        minutes = _as_number(cs2.get("playtime_forever"))
        if not minutes:
            return None
        return round(minutes / 60, 1)

    async def get_game_count(self, steam64: str) -> Optional[int]:
        body = await self._get_json_or_none(OWNED_GAMES_URL, {"steamid": steam64})
        if body is None:
            return None

        game_count = _as_number(_as_dict(body.get("response")).get("game_count"))
        if not game_count:
            return None
        return int(game_count)


# A JSON node of the wrong type reads as missing.
def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_number(value: Any) -> Optional[Union[int, float]]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value
