from discord_mcp.adapters.discord.connection import DiscordConnection

__all__ = ["DiscordConnection"]
