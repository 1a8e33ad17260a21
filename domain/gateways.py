from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from .models import PlayerBans, PlayerSummary, ResolutionFailure


@dataclass(frozen=True)
class VanityLookupResult:
    """
    Result of resolving a vanity handle upstream.

    On success `steam64` holds the id exactly as the upstream returned it.
    On failure `failure` is either `UPSTREAM_UNAVAILABLE` or
    `HANDLE_NOT_FOUND`.
    """

    success: bool
    steam64: Optional[str] = None
    failure: Optional[ResolutionFailure] = None
    error_message: Optional[str] = None


class VanityResolver(Protocol):
    async def resolve_vanity(self, handle: str) -> VanityLookupResult:
        """Resolve `handle` to a SteamID64 with a single upstream request."""

        ...


class SteamGateway(VanityResolver, Protocol):
    """
    Abstraction over the Steam Web API.

    Apart from `resolve_vanity`, lookups never raise: any upstream failure or
    missing field is reported as None, which the presentation layer shows as
    private/unknown.
    """

    async def get_player_summary(self, steam64: str) -> Optional[PlayerSummary]:
        ...

    async def get_player_bans(self, steam64: str) -> Optional[PlayerBans]:
        ...

    async def get_friend_count(self, steam64: str) -> Optional[int]:
        ...

    async def get_cs2_hours(self, steam64: str) -> Optional[float]:
        ...

    async def get_game_count(self, steam64: str) -> Optional[int]:
        ...
