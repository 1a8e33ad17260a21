import asyncio
import logging
import os

import discord
from dotenv import load_dotenv

from infrastructure.steam.web_api import DEFAULT_TIMEOUT_SECONDS, SteamWebApiClient
from interfaces.discord.handlers import create_discord_bot


load_dotenv()

DISCORD_TOKEN = os.environ.get("DISCORD_TOKEN")
STEAM_API_KEY = os.environ.get("STEAM_API_KEY")
GUILD_ID = os.environ.get("GUILD_ID")
STEAM_API_TIMEOUT = float(os.environ.get("STEAM_API_TIMEOUT") or DEFAULT_TIMEOUT_SECONDS)


async def _run(token: str, steam_client: SteamWebApiClient, guild_id) -> None:
    bot = create_discord_bot(steam_client, guild_id)
    try:
        async with bot:
            await bot.start(token)
    finally:
        await steam_client.close()


def main() -> None:
    if not DISCORD_TOKEN:
        raise RuntimeError("DISCORD_TOKEN environment variable is not set.")
    if not STEAM_API_KEY:
        raise RuntimeError("STEAM_API_KEY environment variable is not set.")

    discord.utils.setup_logging(level=logging.INFO)

    guild_id = int(GUILD_ID) if GUILD_ID else None
    steam_client = SteamWebApiClient(STEAM_API_KEY, timeout=STEAM_API_TIMEOUT)

    asyncio.run(_run(DISCORD_TOKEN, steam_client, guild_id))


if __name__ == "__main__":
    main()
