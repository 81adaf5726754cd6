"""Tests for ToolDispatcher — end-to-end tool behaviour over a fake connection."""

import json

import pytest

from discord_mcp.dispatcher import ToolDispatcher, format_timestamp
from discord_mcp.schemas import InvalidArgumentsError
from tests.fake_platform import (
    BOT_USER_ID,
    FakeConnection,
    make_channel,
    make_guild,
    make_message,
)

ALPHA = make_guild(1, "Alpha")
BETA = make_guild(2, "Beta")
GENERAL = make_channel(101, "general", ALPHA)


def _single_server(messages=None):
    return FakeConnection(
        guilds=[ALPHA], channels=[GENERAL], messages={GENERAL.id: messages or []},
    )


def _two_servers():
    beta_general = make_channel(201, "general", BETA)
    return FakeConnection(guilds=[ALPHA, BETA], channels=[GENERAL, beta_general])


class FailingConnection(FakeConnection):
    async def send(self, channel, text):
        raise RuntimeError("Connection reset by peer")


# ---------------------------------------------------------------------------
# send-message
# ---------------------------------------------------------------------------

class TestSendMessage:
    @pytest.mark.asyncio
    async def test_send_by_name(self):
        conn = _single_server()
        text = await ToolDispatcher(conn).call("send-message", {"channel": "general", "message": "hi"})

        assert conn.sent == [(GENERAL.id, "hi")]
        assert text == "Message sent successfully to #general in Alpha. Message ID: 5001"

    @pytest.mark.asyncio
    async def test_message_sent_verbatim(self):
        conn = _single_server()
        body = "  **bold** <@123>\nsecond line  "
        await ToolDispatcher(conn).call("send-message", {"channel": "101", "message": body})
        assert conn.sent == [(GENERAL.id, body)]

    @pytest.mark.asyncio
    async def test_unknown_channel_single_server(self):
        conn = _single_server()
        text = await ToolDispatcher(conn).call(
            "send-message", {"channel": "#nonexistent", "message": "hi"}
        )

        assert text.startswith("Could not send message:")
        assert 'Channel "#nonexistent" not found.' in text
        assert "Available servers" not in text
        assert conn.sent == []

    @pytest.mark.asyncio
    async def test_platform_error_propagates(self):
        conn = FailingConnection(guilds=[ALPHA], channels=[GENERAL])
        with pytest.raises(RuntimeError, match="Connection reset by peer"):
            await ToolDispatcher(conn).call("send-message", {"channel": "general", "message": "hi"})


# ---------------------------------------------------------------------------
# read-messages
# ---------------------------------------------------------------------------

class TestReadMessages:
    @pytest.mark.asyncio
    async def test_multiple_servers_without_hint(self):
        conn = _two_servers()
        text = await ToolDispatcher(conn).call("read-messages", {"channel": "general"})

        assert text.startswith("Could not read messages: Bot is in multiple servers.")
        assert '"Alpha" (1)' in text
        assert '"Beta" (2)' in text
        assert conn.fetches == []

    @pytest.mark.asyncio
    async def test_keeps_platform_order(self):
        newest = make_message(2, "jane", "second", 5)
        oldest = make_message(1, "sam", "first", 0)
        conn = _single_server([newest, oldest])

        text = await ToolDispatcher(conn).call("read-messages", {"channel": "general", "limit": 10})
        payload = json.loads(text)

        assert [p["content"] for p in payload] == ["second", "first"]
        assert payload[0] == {
            "channel": "#general",
            "server": "Alpha",
            "author": "jane",
            "content": "second",
            "timestamp": "2024-05-01T12:05:00.000Z",
        }
        assert conn.fetches == [(GENERAL.id, 10)]

    @pytest.mark.asyncio
    async def test_default_limit(self):
        conn = _single_server()
        text = await ToolDispatcher(conn).call("read-messages", {"channel": "general"})
        assert json.loads(text) == []
        assert conn.fetches == [(GENERAL.id, 50)]

    @pytest.mark.parametrize("limit", [0, 101, -5])
    @pytest.mark.asyncio
    async def test_limit_out_of_bounds(self, limit):
        conn = _single_server()
        with pytest.raises(InvalidArgumentsError, match=r"^Invalid arguments: limit: "):
            await ToolDispatcher(conn).call("read-messages", {"channel": "general", "limit": limit})
        assert conn.fetches == []
        assert conn.lookups == []

    @pytest.mark.asyncio
    async def test_server_hint_by_name(self):
        conn = _two_servers()
        text = await ToolDispatcher(conn).call(
            "read-messages", {"channel": "#general", "server": "beta"}
        )
        assert json.loads(text) == []
        assert conn.fetches == [(201, 50)]


# ---------------------------------------------------------------------------
# reply-to-conversation
# ---------------------------------------------------------------------------

class TestReplyToConversation:
    @pytest.mark.asyncio
    async def test_replies_to_last_human(self):
        own = make_message(1, "DiscordBot", "hello all", 0, author_id=BOT_USER_ID, is_bot=True)
        automated = make_message(2, "Webhook", "build passed", 1, author_id=77, is_bot=True)
        jane = make_message(3, "Jane", "ok", 2, author_id=4321)
        conn = _single_server([jane, automated, own])

        text = await ToolDispatcher(conn).call(
            "reply-to-conversation", {"channel": "general", "message": "thanks", "contextSize": 3}
        )

        assert conn.replies == [(jane.id, "thanks")]
        assert conn.sent == []
        assert conn.fetches == [(GENERAL.id, 3)]
        assert text == (
            "Replied to Jane in #general. Message ID: 5001\n\n"
            "Conversation Context:\n"
            "[BOT:DiscordBot] hello all\n"
            "[BOT:Webhook] build passed\n"
            "[USER:Jane] ok"
        )

    @pytest.mark.asyncio
    async def test_no_human_messages(self):
        own = make_message(1, "DiscordBot", "anyone?", 0, author_id=BOT_USER_ID, is_bot=True)
        conn = _single_server([own])

        text = await ToolDispatcher(conn).call(
            "reply-to-conversation", {"channel": "general", "message": "hi", "contextSize": 5}
        )

        assert text == "No non-bot user messages found in the last 5 messages in #general."
        assert conn.replies == []

    @pytest.mark.asyncio
    async def test_default_context_size(self):
        conn = _single_server([make_message(1, "Sam", "yo", 0)])
        await ToolDispatcher(conn).call("reply-to-conversation", {"channel": "general", "message": "hi"})
        assert conn.fetches == [(GENERAL.id, 25)]

    @pytest.mark.asyncio
    async def test_unknown_server(self):
        conn = _two_servers()
        text = await ToolDispatcher(conn).call(
            "reply-to-conversation", {"channel": "general", "message": "hi", "server": "Gamma"}
        )
        assert text.startswith('Could not reply to conversation: Server "Gamma" not found.')

    @pytest.mark.parametrize("size", [0, 51])
    @pytest.mark.asyncio
    async def test_context_size_out_of_bounds(self, size):
        conn = _single_server()
        with pytest.raises(InvalidArgumentsError, match="contextSize"):
            await ToolDispatcher(conn).call(
                "reply-to-conversation", {"channel": "general", "message": "hi", "contextSize": size}
            )
        assert conn.fetches == []


# ---------------------------------------------------------------------------
# Dispatch and validation
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_missing_fields_all_reported():
    conn = _single_server()
    with pytest.raises(InvalidArgumentsError) as exc:
        await ToolDispatcher(conn).call("send-message", {})
    message = str(exc.value)
    assert message.startswith("Invalid arguments: ")
    assert "channel: Field required" in message
    assert "message: Field required" in message
    assert ", " in message


@pytest.mark.asyncio
async def test_unknown_tool():
    with pytest.raises(ValueError, match="Unknown tool: delete-message"):
        await ToolDispatcher(_single_server()).call("delete-message", {})


def test_tool_names():
    assert ToolDispatcher(_single_server()).tool_names == [
        "send-message",
        "read-messages",
        "reply-to-conversation",
    ]


def test_format_timestamp_naive_treated_as_utc():
    msg = make_message(1, "Sam", "a", 0)
    msg.created_at = msg.created_at.replace(tzinfo=None, microsecond=123456)
    assert format_timestamp(msg) == "2024-05-01T12:00:00.123Z"
