"""Configuration loaded from the environment (and .env)."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from discord_mcp import __version__

load_dotenv()

SERVER_NAME = "discord"


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing at startup."""


@dataclass
class ServerConfig:
    """Typed configuration for the MCP server process."""

    discord_token: str
    server_name: str = SERVER_NAME
    version: str = __version__

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Create ServerConfig from environment variables."""
        token = os.getenv("DISCORD_TOKEN", "").strip()
        if not token:
            raise ConfigurationError("DISCORD_TOKEN environment variable is not set")
        return cls(discord_token=token)
