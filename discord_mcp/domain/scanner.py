"""Conversation scanning — locate the last human message in a window."""

from typing import Iterable, Optional

from discord_mcp.domain.models import ChannelHandle, MessageRecord, ScanResult
from discord_mcp.ports.outbound import ChatPlatformPort


def is_user_message(message: MessageRecord, self_id: Optional[int]) -> bool:
    return not message.is_bot and message.author_id != self_id


async def find_last_user_message(
    connection: ChatPlatformPort,
    channel: ChannelHandle,
    self_id: Optional[int],
    window_size: int = 25,
) -> ScanResult:
    """Fetch up to window_size recent messages and find the newest human one.

    The returned context is ordered oldest first. The window is never
    widened when no human message is found.
    """
    messages = await connection.fetch_messages(channel, window_size)
    ordered = sorted(messages, key=lambda m: m.created_at)

    last_user_message = None
    for message in reversed(ordered):
        if is_user_message(message, self_id):
            last_user_message = message
            break

    return ScanResult(last_user_message=last_user_message, context=ordered)


def format_conversation(messages: Iterable[MessageRecord]) -> str:
    """Render messages as '[BOT:name] text' / '[USER:name] text' lines."""
    lines = []
    for message in messages:
        author_type = "BOT" if message.is_bot else "USER"
        lines.append(f"[{author_type}:{message.author_name}] {message.content}")
    return "\n".join(lines)
