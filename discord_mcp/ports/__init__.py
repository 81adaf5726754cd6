"""Port interfaces (Hexagonal Architecture)."""

from discord_mcp.ports.outbound import ChatPlatformPort

__all__ = [
    "ChatPlatformPort",
]
