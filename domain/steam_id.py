"""
Parsing and conversion of Steam account identifiers.

Users refer to a Steam account in several ways:

- profile URL:        https://steamcommunity.com/profiles/76561197960290419
- vanity URL:         https://steamcommunity.com/id/gabelogannewell
- SteamID64:          76561197960290419
- legacy SteamID:     STEAM_0:1:12345
- SteamID3:           U:1:24691
- bare vanity handle: gabelogannewell

Everything in this module is pure. Vanity handles cannot be resolved locally,
so the parser only reports that a lookup is needed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple, Union

from .models import BASE_OFFSET, ResolutionFailure, SteamIdFormats


MAX_STEAM64 = 2**64 - 1


class SteamIdError(Exception):
    """Raised when a Steam ID cannot be parsed."""


class MalformedSteamIdError(SteamIdError):
    """Raised when a value that should be a SteamID64 is not one."""


class SteamIdKind(Enum):
    PROFILE_URL = "profile_url"
    VANITY_URL = "vanity_url"
    STEAM64 = "steam64"
    LEGACY = "legacy"
    UNIVERSE_QUALIFIED = "universe_qualified"
    VANITY = "vanity"


@dataclass(frozen=True)
class ParsedSteamId:
    """
    Outcome of classifying raw user input.

    Exactly one of `steam64`, `vanity` or `failure` is set.
    """

    kind: Optional[SteamIdKind]
    steam64: Optional[str] = None
    vanity: Optional[str] = None
    failure: Optional[ResolutionFailure] = None
    error_message: Optional[str] = None

    @property
    def needs_name_resolution(self) -> bool:
        return self.vanity is not None


def account_id_to_steam64(account_id: int) -> str:
    return str(account_id + BASE_OFFSET)


def legacy_to_account_id(auth_server: int, account_number: int) -> int:
    return account_number * 2 + auth_server


def steam64_to_account_id(steam64: Union[str, int]) -> int:
    """
    Return `steam64 - BASE_OFFSET`.

    The result is not checked for sign; callers decide how to present
    ids below the base offset.
    """

    return _parse_steam64(steam64) - BASE_OFFSET


def to_all_formats(steam64: Union[str, int]) -> SteamIdFormats:
    """
    Compute every encoding of `steam64`.

    Raises `MalformedSteamIdError` if the value is not an unsigned 64-bit
    integer.
    """

    value = _parse_steam64(steam64)
    account_id = value - BASE_OFFSET
    auth_server = account_id % 2
    account_number = (account_id - auth_server) // 2

    return SteamIdFormats(
        canonical=str(value),
        account_id=account_id,
        legacy=f"STEAM_0:{auth_server}:{account_number}",
        universe_qualified=f"U:1:{account_id}",
    )


def _parse_steam64(steam64: Union[str, int]) -> int:
    if isinstance(steam64, bool):
        raise MalformedSteamIdError(f"Not a SteamID64: {steam64!r}")

    if isinstance(steam64, int):
        value = steam64
    else:
        text = str(steam64).strip()
        if not (text.isascii() and text.isdigit()):
            raise MalformedSteamIdError(f"Not a SteamID64: {steam64!r}")
        value = int(text)

    if value < 0 or value > MAX_STEAM64:
        raise MalformedSteamIdError(f"SteamID64 out of range: {steam64!r}")
    return value


# --- input grammars ---------------------------------------------------------

# re.ASCII keeps \d to 0-9; other Unicode digits are not Steam ids.
PROFILE_URL_PATTERN = re.compile(
    r"steamcommunity\.com/profiles/(\d{17,})", re.IGNORECASE | re.ASCII
)
VANITY_URL_PATTERN = re.compile(
    r"steamcommunity\.com/id/([A-Za-z0-9_-]+)", re.IGNORECASE | re.ASCII
)
STEAM64_PATTERN = re.compile(r"^\d{17,}$", re.ASCII)
LEGACY_PATTERN = re.compile(r"^STEAM_\d:(\d):(\d+)$", re.IGNORECASE | re.ASCII)
UNIVERSE_QUALIFIED_PATTERN = re.compile(r"^U:1:(\d+)$", re.IGNORECASE | re.ASCII)


def _steam64_from_group(kind: SteamIdKind, match: re.Match) -> ParsedSteamId:
    return ParsedSteamId(kind=kind, steam64=match.group(match.lastindex or 0))


def _vanity_from_group(kind: SteamIdKind, match: re.Match) -> ParsedSteamId:
    return ParsedSteamId(kind=kind, vanity=match.group(1))


def _from_legacy(kind: SteamIdKind, match: re.Match) -> ParsedSteamId:
    auth_server = int(match.group(1))
    if auth_server not in (0, 1):
        return ParsedSteamId(
            kind=kind,
            failure=ResolutionFailure.MALFORMED_IDENTITY,
            error_message=(
                f"Invalid SteamID '{match.group(0)}': "
                "the middle digit must be 0 or 1."
            ),
        )

    account_id = legacy_to_account_id(auth_server, int(match.group(2)))
    return ParsedSteamId(kind=kind, steam64=account_id_to_steam64(account_id))


def _from_universe_qualified(kind: SteamIdKind, match: re.Match) -> ParsedSteamId:
    return ParsedSteamId(
        kind=kind, steam64=account_id_to_steam64(int(match.group(1)))
    )


Grammar = Tuple[
    SteamIdKind,
    Callable[[str], Optional[re.Match]],
    Callable[[SteamIdKind, re.Match], ParsedSteamId],
]

# Order matters: first match wins. URLs and bare SteamID64s go before the
# structured forms, and everything goes before the vanity fallback.
GRAMMARS: Tuple[Grammar, ...] = (
    (SteamIdKind.PROFILE_URL, PROFILE_URL_PATTERN.search, _steam64_from_group),
    (SteamIdKind.VANITY_URL, VANITY_URL_PATTERN.search, _vanity_from_group),
    (SteamIdKind.STEAM64, STEAM64_PATTERN.match, _steam64_from_group),
    (SteamIdKind.LEGACY, LEGACY_PATTERN.match, _from_legacy),
    (
        SteamIdKind.UNIVERSE_QUALIFIED,
        UNIVERSE_QUALIFIED_PATTERN.match,
        _from_universe_qualified,
    ),
)


def parse_steam_id(raw_input: str) -> ParsedSteamId:
    """
    Classify `raw_input` and resolve it locally where possible.

    Returns a `ParsedSteamId` holding either the SteamID64, the vanity handle
    that still has to be looked up, or a failure.
    """

    text = (raw_input or "").strip()
    if not text:
        return ParsedSteamId(
            kind=None,
            failure=ResolutionFailure.PARSE_FAILURE,
            error_message="Please provide a Steam profile link, vanity name or id.",
        )

    for kind, matcher, handler in GRAMMARS:
        match = matcher(text)
        if match:
            return handler(kind, match)

    return ParsedSteamId(kind=SteamIdKind.VANITY, vanity=text)
