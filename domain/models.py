from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# SteamID64 of account 0 in the public universe, individual account type.
BASE_OFFSET = 76561197960265728


class ResolutionFailure(str, Enum):
    """Why an input could not be turned into a SteamID64."""

    PARSE_FAILURE = "parse_failure"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    HANDLE_NOT_FOUND = "handle_not_found"
    MALFORMED_IDENTITY = "malformed_identity"


@dataclass(frozen=True)
class SteamIdFormats:
    """
    The four encodings of a single Steam account.

    All fields are derived from the same account id, so the bundle is always
    built in one go by `domain.steam_id.to_all_formats`.
    """

    canonical: str
    account_id: int
    legacy: str
    universe_qualified: str


@dataclass
class PlayerSummary:
    """Subset of `GetPlayerSummaries` shown by the check command."""

    steam_id: str
    persona_name: Optional[str] = None
    profile_url: Optional[str] = None
    avatar_url: Optional[str] = None
    real_name: Optional[str] = None
    country_code: Optional[str] = None
    time_created: Optional[int] = None
    visibility_state: Optional[int] = None
    persona_state: Optional[int] = None
    last_logoff: Optional[int] = None


@dataclass
class PlayerBans:
    vac_banned: bool = False
    vac_ban_count: int = 0
    community_banned: bool = False
    economy_ban: str = "none"
