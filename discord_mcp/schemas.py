"""Tool parameter schemas and argument validation."""

from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

SERVER_DESCRIPTION = "Server name or ID (optional if bot is only in one server)"
CHANNEL_DESCRIPTION = 'Channel name (e.g., "general") or ID'

READ_LIMIT_DEFAULT = 50
READ_LIMIT_MAX = 100
CONTEXT_SIZE_DEFAULT = 25
CONTEXT_SIZE_MAX = 50

ArgsT = TypeVar("ArgsT", bound=BaseModel)


class InvalidArgumentsError(ValueError):
    """Tool arguments failed schema validation."""


class SendMessageArgs(BaseModel):
    server: Optional[str] = Field(None, description=SERVER_DESCRIPTION)
    channel: str = Field(..., description=CHANNEL_DESCRIPTION)
    message: str = Field(..., description="Message content to send")


class ReadMessagesArgs(BaseModel):
    server: Optional[str] = Field(None, description=SERVER_DESCRIPTION)
    channel: str = Field(..., description=CHANNEL_DESCRIPTION)
    limit: int = Field(
        READ_LIMIT_DEFAULT,
        ge=1,
        le=READ_LIMIT_MAX,
        description=f"Number of messages to fetch (max {READ_LIMIT_MAX})",
    )


class ReplyToConversationArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    server: Optional[str] = Field(None, description=SERVER_DESCRIPTION)
    channel: str = Field(..., description=CHANNEL_DESCRIPTION)
    message: str = Field(..., description="Reply message content")
    context_size: int = Field(
        CONTEXT_SIZE_DEFAULT,
        alias="contextSize",
        ge=1,
        le=CONTEXT_SIZE_MAX,
        description=f"Number of messages to analyze for context (max {CONTEXT_SIZE_MAX})",
    )


def format_validation_error(error: ValidationError) -> str:
    """Flatten every pydantic error into 'path: reason' pairs, comma-joined."""
    parts = []
    for item in error.errors():
        path = ".".join(str(p) for p in item["loc"])
        parts.append(f"{path}: {item['msg']}")
    return "Invalid arguments: " + ", ".join(parts)


def parse_args(model: Type[ArgsT], arguments: Optional[Dict[str, Any]]) -> ArgsT:
    """Validate raw tool arguments, raising InvalidArgumentsError on failure."""
    try:
        return model.model_validate(arguments or {})
    except ValidationError as e:
        raise InvalidArgumentsError(format_validation_error(e)) from e
