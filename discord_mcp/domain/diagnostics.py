"""Human-readable not-found diagnostics so the caller can self-correct."""

from typing import Iterable, Optional

from discord_mcp.domain.models import ChannelHandle, GuildHandle
from discord_mcp.domain.resolver import resolve_guild
from discord_mcp.ports.outbound import ChatPlatformPort


def format_guild_list(guilds: Iterable[GuildHandle]) -> str:
    return ", ".join(f'"{g.name}" ({g.id})' for g in guilds)


def format_channel_list(channels: Iterable[ChannelHandle]) -> str:
    return ", ".join(f'"#{c.name}" ({c.id})' for c in channels if c.is_text_capable)


async def describe_unresolved(
    connection: ChatPlatformPort,
    channel: str,
    server: Optional[str] = None,
) -> str:
    """Explain why a channel reference did not resolve.

    Server ambiguity is reported before anything about the channel.
    """
    guilds = connection.joined_guilds()

    if not server and len(guilds) > 1:
        return (
            "Bot is in multiple servers. Please specify server name or ID. "
            f"Available servers: {format_guild_list(guilds)}"
        )

    if server:
        guild = await resolve_guild(connection, server)
        if guild is None:
            return f'Server "{server}" not found. Available servers: {format_guild_list(guilds)}'
        available = format_channel_list(connection.guild_channels(guild))
        return (
            f'Channel "{channel}" not found in server "{guild.name}". '
            f"Available channels: {available}"
        )

    return f'Channel "{channel}" not found.'
