"""Server and channel resolution by ID or display name.

Pure domain logic — works against any ChatPlatformPort.

Ambiguity is accepted: when several servers or channels share a name, the
first one in the platform's enumeration order wins.
"""

from typing import Optional

from discord_mcp.domain.models import ChannelHandle, GuildHandle
from discord_mcp.ports.outbound import ChatPlatformPort

CHANNEL_MARKER = "#"


def strip_marker(reference: str) -> str:
    """Drop a single leading '#' from a human-typed channel name."""
    if reference.startswith(CHANNEL_MARKER):
        return reference[len(CHANNEL_MARKER):]
    return reference


async def resolve_guild(
    connection: ChatPlatformPort, reference: Optional[str] = None
) -> Optional[GuildHandle]:
    """Resolve a server reference (ID or name) to exactly one joined guild.

    With no reference, succeeds only when the bot is in exactly one guild.
    Returns None when nothing matches or the bot's guild is ambiguous.
    """
    if not reference:
        guilds = connection.joined_guilds()
        if len(guilds) == 1:
            return guilds[0]
        return None

    guild = await connection.lookup_guild(reference)
    if guild is not None:
        return guild

    wanted = reference.lower()
    for guild in connection.joined_guilds():
        if guild.name.lower() == wanted:
            return guild
    return None


async def resolve_channel(
    connection: ChatPlatformPort,
    reference: str,
    server: Optional[str] = None,
) -> Optional[ChannelHandle]:
    """Resolve a channel reference (ID or name) to one text-capable channel.

    The server is resolved first; if that fails the channel is not looked
    up at all. A channel found by ID is accepted only if it is text-capable
    and belongs to the resolved guild; otherwise the result is None without
    a name fallback.
    """
    guild = await resolve_guild(connection, server)
    if guild is None:
        return None

    channel = await connection.lookup_channel(reference)
    if channel is not None:
        if channel.is_text_capable and channel.guild_id == guild.id:
            return channel
        return None

    raw_name = reference.lower()
    bare_name = strip_marker(reference).lower()
    for candidate in connection.guild_channels(guild):
        if not candidate.is_text_capable:
            continue
        name = candidate.name.lower()
        if name == raw_name or name == bare_name:
            return candidate
    return None
