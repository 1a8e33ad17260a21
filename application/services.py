from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from domain.gateways import SteamGateway, VanityResolver
from domain.models import PlayerBans, PlayerSummary, ResolutionFailure, SteamIdFormats
from domain.steam_id import MalformedSteamIdError, parse_steam_id, to_all_formats


logger = logging.getLogger(__name__)


@dataclass
class ResolutionResult:
    """Result of turning user input into a SteamID64."""

    success: bool
    steam64: Optional[str] = None
    failure: Optional[ResolutionFailure] = None
    error_message: Optional[str] = None


@dataclass
class ConversionResult:
    """Result of computing every ID format for a SteamID64."""

    success: bool
    formats: Optional[SteamIdFormats] = None
    failure: Optional[ResolutionFailure] = None
    error_message: Optional[str] = None


@dataclass
class ProfileReport:
    """Everything the check command knows about one account."""

    steam64: str
    summary: PlayerSummary
    bans: Optional[PlayerBans] = None
    friend_count: Optional[int] = None
    cs2_hours: Optional[float] = None
    game_count: Optional[int] = None
    # None when the id could not be converted; the rest of the report stands.
    formats: Optional[SteamIdFormats] = None


@dataclass
class ProfileCheckResult:
    success: bool
    report: Optional[ProfileReport] = None
    failure: Optional[ResolutionFailure] = None
    error_message: Optional[str] = None


async def resolve_steam_id(
    raw_input: str,
    vanity_resolver: VanityResolver,
) -> ResolutionResult:
    """
    Resolve any supported reference to a Steam account into a SteamID64.

    Local grammars are tried first; the vanity lookup runs only when none of
    them applies, and its outcome is final.
    """

    parsed = parse_steam_id(raw_input)

    if parsed.steam64 is not None:
        return ResolutionResult(success=True, steam64=parsed.steam64)

    if parsed.failure is not None:
        return ResolutionResult(
            success=False,
            failure=parsed.failure,
            error_message=parsed.error_message,
        )

    lookup = await vanity_resolver.resolve_vanity(parsed.vanity)
    if lookup.success:
        return ResolutionResult(success=True, steam64=lookup.steam64)

    logger.info("Vanity lookup for %r failed: %s", parsed.vanity, lookup.failure)
    return ResolutionResult(
        success=False,
        failure=lookup.failure,
        error_message=lookup.error_message,
    )


def convert_steam_id(steam64: str) -> ConversionResult:
    """
    Compute all ID formats for `steam64`.

    Never raises; a malformed id is reported through the result so callers
    can carry on without the formats.
    """

    try:
        formats = to_all_formats(steam64)
    except MalformedSteamIdError as exc:
        return ConversionResult(
            success=False,
            failure=ResolutionFailure.MALFORMED_IDENTITY,
            error_message=str(exc),
        )

    return ConversionResult(success=True, formats=formats)


async def check_profile(raw_input: str, gateway: SteamGateway) -> ProfileCheckResult:
    """
    Resolve `raw_input` and gather profile, ban and activity data for it.

    Only a failed resolution or a missing player summary fails the check.
    Every other lookup is best effort.
    """

    resolution = await resolve_steam_id(raw_input, gateway)
    if not resolution.success:
        return ProfileCheckResult(
            success=False,
            failure=resolution.failure,
            error_message=resolution.error_message,
        )

    steam64 = resolution.steam64
    summary = await gateway.get_player_summary(steam64)
    bans = await gateway.get_player_bans(steam64)
    friend_count = await gateway.get_friend_count(steam64)
    cs2_hours = await gateway.get_cs2_hours(steam64)
    game_count = await gateway.get_game_count(steam64)

    if summary is None:
        return ProfileCheckResult(
            success=False,
            error_message="Could not fetch Steam profile (maybe private or not found).",
        )

    conversion = convert_steam_id(steam64)
    if not conversion.success:
        logger.warning("Could not convert %r: %s", steam64, conversion.error_message)

    report = ProfileReport(
        steam64=steam64,
        summary=summary,
        bans=bans,
        friend_count=friend_count,
        cs2_hours=cs2_hours,
        game_count=game_count,
        formats=conversion.formats,
    )
    return ProfileCheckResult(success=True, report=report)
