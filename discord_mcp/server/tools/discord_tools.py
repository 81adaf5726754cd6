"""MCP tools for Discord messaging.

Registered on the low-level server so the published input schemas and the
argument validation both come from the pydantic models in schemas.py.
"""

from typing import Any, Dict, List, Optional

import mcp.types as types

from discord_mcp.dispatcher import ToolDispatcher
from discord_mcp.schemas import ReadMessagesArgs, ReplyToConversationArgs, SendMessageArgs
from discord_mcp.server.mcp_server import mcp

# (tool name, description, argument model)
TOOL_SPECS = [
    ("send-message", "Send a message to a Discord channel", SendMessageArgs),
    ("read-messages", "Read recent messages from a Discord channel", ReadMessagesArgs),
    (
        "reply-to-conversation",
        "Reply to the last non-bot user in the conversation",
        ReplyToConversationArgs,
    ),
]

_server = mcp._mcp_server


def _dispatcher() -> ToolDispatcher:
    return _server.request_context.lifespan_context


@_server.list_tools()
async def list_tools() -> List[types.Tool]:
    return [
        types.Tool(
            name=name,
            description=description,
            inputSchema=model.model_json_schema(by_alias=True),
        )
        for name, description, model in TOOL_SPECS
    ]


@_server.call_tool(validate_input=False)
async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
    """Hand raw arguments to the dispatcher, which validates them itself."""
    text = await _dispatcher().call(name, arguments)
    return [types.TextContent(type="text", text=text)]
