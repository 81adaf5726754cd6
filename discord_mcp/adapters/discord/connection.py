"""Discord adapter — discord.Client implementing ChatPlatformPort.

Converts discord.py guilds, channels and messages into the domain handles
used by the resolvers, scanner and dispatcher. Channel kinds are tagged
here, once, so nothing downstream inspects discord classes.
"""

import sys
from typing import List, Optional

import discord

from discord_mcp.domain.models import ChannelHandle, ChannelKind, GuildHandle, MessageRecord

# Errors that mean "no such ID" for lookups; they degrade to name matching.
_LOOKUP_ERRORS = (discord.HTTPException, discord.InvalidData)

_KIND_BY_TYPE = {
    discord.ChannelType.text: ChannelKind.TEXT,
    discord.ChannelType.news: ChannelKind.NEWS,
    discord.ChannelType.voice: ChannelKind.VOICE,
    discord.ChannelType.stage_voice: ChannelKind.STAGE,
    discord.ChannelType.category: ChannelKind.CATEGORY,
    discord.ChannelType.forum: ChannelKind.FORUM,
    discord.ChannelType.public_thread: ChannelKind.THREAD,
    discord.ChannelType.private_thread: ChannelKind.THREAD,
    discord.ChannelType.news_thread: ChannelKind.THREAD,
    discord.ChannelType.private: ChannelKind.PRIVATE,
    discord.ChannelType.group: ChannelKind.PRIVATE,
}


def _log(msg: str):
    print(msg, file=sys.stderr)


def _parse_id(value: str) -> Optional[int]:
    value = value.strip()
    if not value.isdigit():
        return None
    return int(value)


def channel_kind(channel) -> ChannelKind:
    return _KIND_BY_TYPE.get(getattr(channel, "type", None), ChannelKind.OTHER)


def to_guild_handle(guild: discord.Guild) -> GuildHandle:
    return GuildHandle(id=guild.id, name=guild.name, raw=guild)


def to_channel_handle(channel) -> ChannelHandle:
    """Convert any discord channel into a kind-tagged ChannelHandle."""
    guild = getattr(channel, "guild", None)
    return ChannelHandle(
        id=channel.id,
        name=getattr(channel, "name", None) or "",
        kind=channel_kind(channel),
        guild_id=guild.id if guild is not None else None,
        guild_name=guild.name if guild is not None else "",
        raw=channel,
    )


def to_message_record(message: discord.Message) -> MessageRecord:
    author = message.author
    return MessageRecord(
        id=message.id,
        author_id=author.id,
        author_name=author.name,
        author_tag=str(author),
        is_bot=author.bot,
        content=message.content,
        created_at=message.created_at,
        raw=message,
    )


class DiscordConnection(discord.Client):
    """Single long-lived Discord connection shared by every tool call."""

    def __init__(self, **discord_kwargs):
        intents = discord.Intents.none()
        intents.guilds = True
        intents.guild_messages = True
        intents.message_content = True
        super().__init__(intents=intents, **discord_kwargs)

    async def on_ready(self):
        _log(f"Discord bot is ready! Logged in as {self.user}")

    # -- ChatPlatformPort --

    @property
    def self_id(self) -> Optional[int]:
        return self.user.id if self.user else None

    def joined_guilds(self) -> List[GuildHandle]:
        return [to_guild_handle(g) for g in self.guilds]

    async def lookup_guild(self, guild_id: str) -> Optional[GuildHandle]:
        parsed = _parse_id(guild_id)
        if parsed is None:
            return None
        guild = self.get_guild(parsed)
        if guild is None:
            try:
                guild = await self.fetch_guild(parsed)
            except _LOOKUP_ERRORS as e:
                _log(f"Guild lookup failed for {guild_id}: {e}")
                return None
        return to_guild_handle(guild)

    async def lookup_channel(self, channel_id: str) -> Optional[ChannelHandle]:
        parsed = _parse_id(channel_id)
        if parsed is None:
            return None
        channel = self.get_channel(parsed)
        if channel is None:
            try:
                channel = await self.fetch_channel(parsed)
            except _LOOKUP_ERRORS as e:
                _log(f"Channel lookup failed for {channel_id}: {e}")
                return None
        return to_channel_handle(channel)

    def guild_channels(self, guild: GuildHandle) -> List[ChannelHandle]:
        raw = self.get_guild(guild.id) or guild.raw
        if raw is None:
            return []
        return [to_channel_handle(c) for c in raw.channels]

    async def fetch_messages(self, channel: ChannelHandle, limit: int) -> List[MessageRecord]:
        return [to_message_record(m) async for m in channel.raw.history(limit=limit)]

    async def send(self, channel: ChannelHandle, text: str) -> MessageRecord:
        sent = await channel.raw.send(text)
        return to_message_record(sent)

    async def reply(self, message: MessageRecord, text: str) -> MessageRecord:
        sent = await message.raw.reply(text)
        return to_message_record(sent)
