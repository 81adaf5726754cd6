"""Discord MCP stdio server — FastMCP entrypoint."""

import asyncio
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP

from discord_mcp.adapters.discord import DiscordConnection
from discord_mcp.config import SERVER_NAME, ServerConfig
from discord_mcp.dispatcher import ToolDispatcher


def _log(msg: str):
    print(msg, file=sys.stderr)


async def connect_discord(connection: DiscordConnection, token: str) -> asyncio.Task:
    """Log in and start the gateway, returning once the client is ready.

    Raises whatever the gateway task raised if it stops before ready.
    """
    await connection.login(token)
    gateway = asyncio.create_task(connection.connect())
    ready = asyncio.create_task(connection.wait_until_ready())
    done, _ = await asyncio.wait({gateway, ready}, return_when=asyncio.FIRST_COMPLETED)
    if ready not in done:
        ready.cancel()
        gateway.result()
        raise ConnectionError("Discord gateway closed before becoming ready")
    return gateway


@asynccontextmanager
async def lifespan(app: FastMCP) -> AsyncIterator[ToolDispatcher]:
    """Own the Discord connection for the lifetime of the MCP session."""
    config = ServerConfig.from_env()
    connection = DiscordConnection()
    gateway = await connect_discord(connection, config.discord_token)
    _log("Discord MCP Server running on stdio")
    try:
        yield ToolDispatcher(connection)
    finally:
        await connection.close()
        gateway.cancel()
        try:
            await gateway
        except asyncio.CancelledError:
            pass
        except Exception as e:
            _log(f"Discord gateway stopped with error: {e}")


# Create MCP server instance
mcp = FastMCP(
    SERVER_NAME,
    instructions="Discord messaging tools: send messages, read recent messages, and reply to the last human message in a channel.",
    lifespan=lifespan,
)

# Import tool modules to register them with mcp
from discord_mcp.server.tools import discord_tools  # noqa: F401, E402


def main():
    """Validate configuration, then run the MCP server via stdio transport."""
    try:
        ServerConfig.from_env()
        mcp.run(transport="stdio")
    except Exception as e:
        _log(f"Fatal error in main(): {e}")
        sys.exit(1)
