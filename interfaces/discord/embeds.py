from __future__ import annotations

from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional

import discord

from application.services import ProfileReport
from domain.models import PlayerBans


EMBED_COLOUR = 0x1B2838
FOOTER_TEXT = "Steam Check • steamid.xyz"
FOOTER_ICON_URL = "https://upload.wikimedia.org/wikipedia/commons/8/83/Steam_icon_logo.svg"
PRIVATE = "<Private>"
MISSING = "—"

_VISIBILITY = {1: "Private", 2: "Friends Only", 3: "Public"}
_PERSONA_STATE = {
    0: "Offline",
    1: "Online",
    2: "Busy",
    3: "Away",
    4: "Snooze",
    5: "Looking to Trade",
    6: "Looking to Play",
}


def visibility_text(code: Optional[int]) -> str:
    return _VISIBILITY.get(code, f"Unknown ({code})")


def persona_state_text(code: Optional[int]) -> str:
    return _PERSONA_STATE.get(code, f"Unknown ({code})")


def format_timestamp(unix_seconds: Optional[int]) -> str:
    """Render a Unix timestamp the way HTTP dates look, always in UTC."""

    if not unix_seconds:
        return MISSING
    moment = datetime.fromtimestamp(unix_seconds, tz=timezone.utc)
    return format_datetime(moment, usegmt=True)


def profile_url_for(report: ProfileReport) -> str:
    return (
        report.summary.profile_url
        or f"https://steamcommunity.com/profiles/{report.steam64}"
    )


def _code_block(text: str) -> str:
    return f"```{text}```"


def _ban_line(bans: Optional[PlayerBans]) -> str:
    if bans is None:
        return "❔ Ban status unavailable"

    vac = (
        f"❌ VAC Banned ( {bans.vac_ban_count} bans )" if bans.vac_banned else "✔ VAC"
    )
    economy = (
        f"❌ Economy: {bans.economy_ban}"
        if bans.economy_ban and bans.economy_ban != "none"
        else "✔ Trade"
    )
    community = "❌ Community Banned" if bans.community_banned else "✔ Community"
    return f"{vac} • {economy} • {community}"


def _steam_ids_block(report: ProfileReport) -> str:
    formats = report.formats
    if formats is None:
        steam2 = steam3 = steam32 = "N/A"
        steam64 = report.steam64
    else:
        steam2 = formats.legacy
        steam3 = formats.universe_qualified
        steam32 = str(formats.account_id)
        steam64 = formats.canonical

    return (
        f"Steam2   {steam2}\n"
        f"Steam3   {steam3}\n"
        f"Steam32  {steam32}\n"
        f"Steam64  {steam64}"
    )


def build_profile_embed(report: ProfileReport) -> discord.Embed:
    """Lay out a `ProfileReport` as the check command's reply."""

    summary = report.summary
    profile_url = profile_url_for(report)

    account_details = (
        f"Country   {summary.country_code or MISSING}\n"
        f"Created   {format_timestamp(summary.time_created)}\n"
        f"Visibility {visibility_text(summary.visibility_state)}"
    )
    activity = (
        f"Status     {persona_state_text(summary.persona_state)}\n"
        f"Last Online {format_timestamp(summary.last_logoff)}"
    )

    cs2_hours = f"{report.cs2_hours:.1f} hours" if report.cs2_hours else PRIVATE
    games = str(report.game_count) if report.game_count else PRIVATE
    friends = str(report.friend_count) if report.friend_count is not None else PRIVATE
    other = f"CS2 Hours  {cs2_hours}\nGames      {games}\nFriends    {friends}"

    embed = discord.Embed(
        title=summary.persona_name or "Unknown",
        url=profile_url,
        description=f"**Real Name:** {summary.real_name or MISSING}",
        colour=EMBED_COLOUR,
        timestamp=datetime.now(timezone.utc),
    )
    if summary.avatar_url:
        embed.set_thumbnail(url=summary.avatar_url)

    embed.add_field(name="Account Details", value=_code_block(account_details), inline=False)
    embed.add_field(name="Activity", value=_code_block(activity), inline=False)
    embed.add_field(name="Other", value=_code_block(other), inline=False)
    embed.add_field(name="Bans / Trade / Community", value=_ban_line(report.bans), inline=False)
    embed.add_field(name="Steam IDs", value=_code_block(_steam_ids_block(report)), inline=False)
    embed.add_field(name="Profile URL", value=profile_url, inline=False)
    embed.set_footer(text=FOOTER_TEXT, icon_url=FOOTER_ICON_URL)
    return embed
