"""ToolDispatcher — validates tool arguments and runs the Discord operations.

No discord import: everything goes through the ChatPlatformPort handed in
at construction, so the dispatcher is testable with a fake connection.
"""

import json
import sys
from datetime import timezone
from typing import Any, Dict, Optional

from discord_mcp.domain.diagnostics import describe_unresolved
from discord_mcp.domain.models import ChannelHandle, MessageRecord
from discord_mcp.domain.resolver import resolve_channel
from discord_mcp.domain.scanner import find_last_user_message, format_conversation
from discord_mcp.ports.outbound import ChatPlatformPort
from discord_mcp.schemas import (
    ReadMessagesArgs,
    ReplyToConversationArgs,
    SendMessageArgs,
    parse_args,
)


def _log(msg: str):
    print(msg, file=sys.stderr)


def format_timestamp(message: MessageRecord) -> str:
    """ISO-8601 in UTC with millisecond precision and a 'Z' suffix."""
    created = message.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    text = created.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


class ToolDispatcher:
    """Runs the three Discord tools against one shared connection."""

    def __init__(self, connection: ChatPlatformPort):
        self._connection = connection
        self._handlers = {
            "send-message": self._call_send_message,
            "read-messages": self._call_read_messages,
            "reply-to-conversation": self._call_reply_to_conversation,
        }

    @property
    def tool_names(self):
        return list(self._handlers)

    async def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        """Dispatch a tool call by name with raw (unvalidated) arguments."""
        handler = self._handlers.get(name)
        if handler is None:
            raise ValueError(f"Unknown tool: {name}")
        return await handler(arguments or {})

    async def _call_send_message(self, arguments: Dict[str, Any]) -> str:
        args = parse_args(SendMessageArgs, arguments)
        return await self.send_message(args.channel, args.message, server=args.server)

    async def _call_read_messages(self, arguments: Dict[str, Any]) -> str:
        args = parse_args(ReadMessagesArgs, arguments)
        return await self.read_messages(args.channel, server=args.server, limit=args.limit)

    async def _call_reply_to_conversation(self, arguments: Dict[str, Any]) -> str:
        args = parse_args(ReplyToConversationArgs, arguments)
        return await self.reply_to_conversation(
            args.channel, args.message, server=args.server, context_size=args.context_size
        )

    # -- Operations (arguments already validated) --

    async def _resolve(self, channel: str, server: Optional[str]) -> Optional[ChannelHandle]:
        return await resolve_channel(self._connection, channel, server)

    async def send_message(self, channel: str, message: str, server: Optional[str] = None) -> str:
        target = await self._resolve(channel, server)
        if target is None:
            reason = await describe_unresolved(self._connection, channel, server)
            return f"Could not send message: {reason}"

        sent = await self._connection.send(target, message)
        _log(f"send-message: #{target.name} ({target.guild_name}) id={sent.id}")
        return (
            f"Message sent successfully to #{target.name} in {target.guild_name}. "
            f"Message ID: {sent.id}"
        )

    async def read_messages(
        self, channel: str, server: Optional[str] = None, limit: int = 50
    ) -> str:
        target = await self._resolve(channel, server)
        if target is None:
            reason = await describe_unresolved(self._connection, channel, server)
            return f"Could not read messages: {reason}"

        # Kept in the platform's order (newest first), not re-sorted
        messages = await self._connection.fetch_messages(target, limit)
        formatted = [
            {
                "channel": f"#{target.name}",
                "server": target.guild_name,
                "author": m.author_tag,
                "content": m.content,
                "timestamp": format_timestamp(m),
            }
            for m in messages
        ]
        return json.dumps(formatted, indent=2, ensure_ascii=False)

    async def reply_to_conversation(
        self,
        channel: str,
        message: str,
        server: Optional[str] = None,
        context_size: int = 25,
    ) -> str:
        target = await self._resolve(channel, server)
        if target is None:
            reason = await describe_unresolved(self._connection, channel, server)
            return f"Could not reply to conversation: {reason}"

        scan = await find_last_user_message(
            self._connection, target, self._connection.self_id, context_size
        )
        if scan.last_user_message is None:
            return (
                f"No non-bot user messages found in the last {context_size} "
                f"messages in #{target.name}."
            )

        conversation_text = format_conversation(scan.context)
        sent = await self._connection.reply(scan.last_user_message, message)
        _log(
            f"reply-to-conversation: replied to {scan.last_user_message.author_name} "
            f"in #{target.name} id={sent.id}"
        )
        return (
            f"Replied to {scan.last_user_message.author_name} in #{target.name}. "
            f"Message ID: {sent.id}\n\n"
            f"Conversation Context:\n{conversation_text}"
        )
