from __future__ import annotations

import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from application.services import check_profile
from domain.gateways import SteamGateway
from interfaces.discord.embeds import build_profile_embed


logger = logging.getLogger(__name__)


async def run_check(interaction: discord.Interaction, profile: str, gateway: SteamGateway) -> None:
    """
    Body of the /check command.

    The reply is deferred first because the Steam lookups can take longer
    than Discord's initial response window.
    """

    await interaction.response.defer()
    try:
        result = await check_profile(profile, gateway)
    except Exception as exc:
        logger.exception("Steam check for %r failed", profile)
        await interaction.edit_original_response(content=f"Error: {exc}")
        return

    if not result.success:
        await interaction.edit_original_response(
            content=f"Error: {result.error_message or 'Steam check failed.'}"
        )
        return

    await interaction.edit_original_response(embed=build_profile_embed(result.report))


def create_discord_bot(
    gateway: SteamGateway,
    guild_id: Optional[int] = None,
) -> commands.Bot:
    """
    Configure and return a Discord bot exposing the /check slash command.

    With `guild_id` set the command is synced to that guild only, which makes
    it available immediately; otherwise it is synced globally.
    """

    intents = discord.Intents.default()
    intents.guilds = True

    bot = commands.Bot(
        command_prefix=commands.when_mentioned,
        intents=intents,
        help_command=None,
    )

    @app_commands.command(name="check", description="Check a Steam profile and show bans/info")
    @app_commands.describe(profile="Steam profile link, vanity, or id")
    async def check_cmd(interaction: discord.Interaction, profile: str):
        await run_check(interaction, profile, gateway)

    bot.tree.add_command(check_cmd)

    async def setup_hook() -> None:
        try:
            if guild_id is not None:
                guild = discord.Object(id=guild_id)
                bot.tree.copy_global_to(guild=guild)
                synced = await bot.tree.sync(guild=guild)
            else:
                synced = await bot.tree.sync()
            logger.info("Synced %d commands", len(synced))
        except discord.HTTPException:
            logger.exception("Failed to sync commands")

    bot.setup_hook = setup_hook

    @bot.event
    async def on_ready():
        logger.info("Discord bot logged in as %s (id=%s)", bot.user, bot.user.id)

    return bot
