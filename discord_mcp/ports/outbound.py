"""Outbound port — interface for the chat platform connection."""

from typing import List, Optional, Protocol, runtime_checkable

from discord_mcp.domain.models import ChannelHandle, GuildHandle, MessageRecord


@runtime_checkable
class ChatPlatformPort(Protocol):
    """Interface for a single long-lived chat platform connection.

    ID lookups return None on any failure so callers can fall back to
    name matching. Send/fetch/reply errors propagate unchanged.
    """

    @property
    def self_id(self) -> Optional[int]: ...

    def joined_guilds(self) -> List[GuildHandle]: ...

    async def lookup_guild(self, guild_id: str) -> Optional[GuildHandle]: ...

    async def lookup_channel(self, channel_id: str) -> Optional[ChannelHandle]: ...

    def guild_channels(self, guild: GuildHandle) -> List[ChannelHandle]: ...

    async def fetch_messages(self, channel: ChannelHandle, limit: int) -> List[MessageRecord]: ...

    async def send(self, channel: ChannelHandle, text: str) -> MessageRecord: ...

    async def reply(self, message: MessageRecord, text: str) -> MessageRecord: ...
