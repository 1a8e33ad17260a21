import asyncio
import unittest
from unittest.mock import AsyncMock

import aiohttp
from aiohttp import ClientResponse, ClientSession

from domain.models import ResolutionFailure
from infrastructure.steam.web_api import (
    FRIEND_LIST_URL,
    OWNED_GAMES_URL,
    PLAYER_BANS_URL,
    PLAYER_SUMMARIES_URL,
    RESOLVE_VANITY_URL,
    SteamWebApiClient,
)


def _mock_session(status=200, body=None):
    session = AsyncMock(spec=ClientSession)
    session.closed = False
    response = AsyncMock(spec=ClientResponse)
    response.status = status
    response.json.return_value = body
    session.get.return_value.__aenter__.return_value = response
    return session


class ResolveVanityTests(unittest.IsolatedAsyncioTestCase):
    async def test_resolve_vanity_success(self):
        session = _mock_session(
            body={"response": {"steamid": "76561197960287930", "success": 1}}
        )
        client = SteamWebApiClient("secret", session=session)

        result = await client.resolve_vanity("gabe newell")

        self.assertTrue(result.success)
        self.assertEqual(result.steam64, "76561197960287930")
        session.get.assert_called_once_with(
            RESOLVE_VANITY_URL, params={"key": "secret", "vanityurl": "gabe newell"}
        )

    async def test_resolve_vanity_no_match(self):
        session = _mock_session(body={"response": {"success": 42, "message": "No match"}})
        client = SteamWebApiClient("secret", session=session)

        result = await client.resolve_vanity("nobody")

        self.assertFalse(result.success)
        self.assertEqual(result.failure, ResolutionFailure.HANDLE_NOT_FOUND)

    async def test_resolve_vanity_success_without_steamid(self):
        session = _mock_session(body={"response": {"success": 1}})
        client = SteamWebApiClient("secret", session=session)

        result = await client.resolve_vanity("nobody")

        self.assertEqual(result.failure, ResolutionFailure.HANDLE_NOT_FOUND)

    async def test_resolve_vanity_response_of_wrong_type(self):
        for body in ({"response": "nope"}, {"response": ["x"]}, ["response"], "nope"):
            with self.subTest(body=body):
                session = _mock_session(body=body)
                client = SteamWebApiClient("secret", session=session)

                result = await client.resolve_vanity("x")

                self.assertFalse(result.success)
                self.assertEqual(result.failure, ResolutionFailure.HANDLE_NOT_FOUND)

    async def test_resolve_vanity_http_error(self):
        session = _mock_session(status=503)
        client = SteamWebApiClient("secret", session=session)

        result = await client.resolve_vanity("gaben")

        self.assertFalse(result.success)
        self.assertIsNone(result.steam64)
        self.assertEqual(result.failure, ResolutionFailure.UPSTREAM_UNAVAILABLE)

    async def test_resolve_vanity_transport_error(self):
        session = AsyncMock(spec=ClientSession)
        session.closed = False
        session.get.side_effect = aiohttp.ClientConnectionError("boom")
        client = SteamWebApiClient("secret", session=session)

        result = await client.resolve_vanity("gaben")

        self.assertEqual(result.failure, ResolutionFailure.UPSTREAM_UNAVAILABLE)

    async def test_resolve_vanity_timeout(self):
        session = AsyncMock(spec=ClientSession)
        session.closed = False
        session.get.side_effect = asyncio.TimeoutError()
        client = SteamWebApiClient("secret", session=session)

        result = await client.resolve_vanity("gaben")

        self.assertEqual(result.failure, ResolutionFailure.UPSTREAM_UNAVAILABLE)


class ProfileLookupTests(unittest.IsolatedAsyncioTestCase):
    async def test_get_player_summary(self):
        session = _mock_session(
            body={
                "response": {
                    "players": [
                        {
                            "steamid": "76561197960290419",
                            "personaname": "John",
                            "profileurl": "https://steamcommunity.com/id/john/",
                            "avatar": "small.jpg",
                            "avatarfull": "full.jpg",
                            "loccountrycode": "US",
                            "timecreated": 1060000000,
                            "communityvisibilitystate": 3,
                            "personastate": 1,
                        }
                    ]
                }
            }
        )
        client = SteamWebApiClient("secret", session=session)

        summary = await client.get_player_summary("76561197960290419")

        self.assertEqual(summary.persona_name, "John")
        self.assertEqual(summary.avatar_url, "full.jpg")
        self.assertEqual(summary.country_code, "US")
        self.assertEqual(summary.visibility_state, 3)
        self.assertIsNone(summary.real_name)
        session.get.assert_called_once_with(
            PLAYER_SUMMARIES_URL,
            params={"key": "secret", "steamids": "76561197960290419"},
        )

    async def test_get_player_summary_unknown_player(self):
        session = _mock_session(body={"response": {"players": []}})
        client = SteamWebApiClient("secret", session=session)

        self.assertIsNone(await client.get_player_summary("76561197960290419"))

    async def test_get_player_bans(self):
        session = _mock_session(
            body={
                "players": [
                    {
                        "SteamId": "76561197960290419",
                        "CommunityBanned": False,
                        "VACBanned": True,
                        "NumberOfVACBans": 2,
                        "EconomyBan": "probation",
                    }
                ]
            }
        )
        client = SteamWebApiClient("secret", session=session)

        bans = await client.get_player_bans("76561197960290419")

        self.assertTrue(bans.vac_banned)
        self.assertEqual(bans.vac_ban_count, 2)
        self.assertFalse(bans.community_banned)
        self.assertEqual(bans.economy_ban, "probation")
        session.get.assert_called_once_with(
            PLAYER_BANS_URL, params={"key": "secret", "steamids": "76561197960290419"}
        )

    async def test_get_friend_count(self):
        session = _mock_session(
            body={"friendslist": {"friends": [{"steamid": "1"}, {"steamid": "2"}]}}
        )
        client = SteamWebApiClient("secret", session=session)

        self.assertEqual(await client.get_friend_count("76561197960290419"), 2)
        session.get.assert_called_once_with(
            FRIEND_LIST_URL, params={"key": "secret", "steamid": "76561197960290419"}
        )

    async def test_private_friend_list(self):
        session = _mock_session(status=401)
        client = SteamWebApiClient("secret", session=session)

        self.assertIsNone(await client.get_friend_count("76561197960290419"))

    async def test_get_cs2_hours(self):
        session = _mock_session(
            body={
                "response": {
                    "game_count": 2,
                    "games": [
                        {"appid": 440, "playtime_forever": 10},
                        {"appid": 730, "playtime_forever": 612},
                    ],
                }
            }
        )
        client = SteamWebApiClient("secret", session=session)

        self.assertEqual(await client.get_cs2_hours("76561197960290419"), 10.2)
        session.get.assert_called_once_with(
            OWNED_GAMES_URL,
            params={
                "key": "secret",
                "steamid": "76561197960290419",
                "include_appinfo": 1,
                "include_played_free_games": 1,
            },
        )

    async def test_get_cs2_hours_not_owned(self):
        session = _mock_session(
            body={"response": {"games": [{"appid": 440, "playtime_forever": 10}]}}
        )
        client = SteamWebApiClient("secret", session=session)

        self.assertIsNone(await client.get_cs2_hours("76561197960290419"))

    async def test_get_game_count(self):
        session = _mock_session(body={"response": {"game_count": 17}})
        client = SteamWebApiClient("secret", session=session)

        self.assertEqual(await client.get_game_count("76561197960290419"), 17)

    async def test_get_game_count_private_profile(self):
        session = _mock_session(body={"response": {}})
        client = SteamWebApiClient("secret", session=session)

        self.assertIsNone(await client.get_game_count("76561197960290419"))

    async def test_lookups_with_wrong_shapes_are_unknown(self):
        steam64 = "76561197960290419"
        cases = [
            ("get_player_summary", {"response": "nope"}),
            ("get_player_summary", {"response": {"players": "nope"}}),
            ("get_player_summary", {"response": {"players": ["nope"]}}),
            ("get_player_bans", {"players": "nope"}),
            ("get_player_bans", {"players": [42]}),
            ("get_friend_count", {"friendslist": "nope"}),
            ("get_friend_count", {"friendslist": {"friends": "nope"}}),
            ("get_cs2_hours", {"response": "nope"}),
            ("get_cs2_hours", {"response": {"games": ["nope", {"appid": 730}]}}),
            ("get_cs2_hours", {"response": {"games": [{"appid": 730, "playtime_forever": "x"}]}}),
            ("get_game_count", {"response": ["nope"]}),
            ("get_game_count", {"response": {"game_count": "many"}}),
        ]
        for method, body in cases:
            with self.subTest(method=method, body=body):
                client = SteamWebApiClient("secret", session=_mock_session(body=body))

                self.assertIsNone(await getattr(client, method)(steam64))

    async def test_lookup_transport_error_is_unknown(self):
        session = AsyncMock(spec=ClientSession)
        session.closed = False
        session.get.side_effect = aiohttp.ClientConnectionError("boom")
        client = SteamWebApiClient("secret", session=session)

        self.assertIsNone(await client.get_player_bans("76561197960290419"))

    async def test_close_leaves_injected_session_open(self):
        session = _mock_session()
        client = SteamWebApiClient("secret", session=session)

        await client.close()

        session.close.assert_not_called()


if __name__ == "__main__":
    unittest.main()
