"""Domain data models — pure Python dataclasses, no discord import."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional


class ChannelKind(Enum):
    """Closed set of channel kinds, tagged once by the adapter."""

    TEXT = "text"
    NEWS = "news"
    VOICE = "voice"
    STAGE = "stage"
    CATEGORY = "category"
    FORUM = "forum"
    THREAD = "thread"
    PRIVATE = "private"
    OTHER = "other"


# Announcement (news) channels are excluded: only plain text channels qualify.
TEXT_CAPABLE_KINDS = frozenset({ChannelKind.TEXT})


@dataclass
class GuildHandle:
    """A server (guild) the bot is joined to."""

    id: int
    name: str
    raw: Any = field(default=None, repr=False, compare=False)


@dataclass
class ChannelHandle:
    """A channel, tagged with its kind and owning guild (if any)."""

    id: int
    name: str
    kind: ChannelKind
    guild_id: Optional[int] = None
    guild_name: str = ""
    raw: Any = field(default=None, repr=False, compare=False)

    @property
    def is_text_capable(self) -> bool:
        return self.kind in TEXT_CAPABLE_KINDS


@dataclass
class MessageRecord:
    """Platform message, read-only view."""

    id: int
    author_id: int
    author_name: str  # username
    author_tag: str  # username, or username#discriminator for legacy accounts
    is_bot: bool
    content: str
    created_at: datetime
    raw: Any = field(default=None, repr=False, compare=False)


@dataclass
class ScanResult:
    """Outcome of scanning a conversation window."""

    last_user_message: Optional[MessageRecord]
    context: List[MessageRecord] = field(default_factory=list)
