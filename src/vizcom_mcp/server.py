"""MCP server wiring: tool listing, dispatch and result framing."""

import json
import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from pydantic import ValidationError as PydanticValidationError

from vizcom_mcp.containers import AppContainer
from vizcom_mcp.errors import (
    AuthError,
    GraphQLError,
    JobFailedError,
    NotAuthenticatedError,
)
from vizcom_mcp.tools.base import ToolContext, failed_job_payload
from vizcom_mcp.tools.catalog import ALL_TOOLS, TOOLS_BY_NAME

SERVER_NAME = "vizcom"

SESSION_EXPIRED_MESSAGE = (
    "Your Vizcom session has expired or is invalid. "
    "Run `vizcom-mcp login` to re-authenticate."
)

_SESSION_MARKERS = (
    "unauthorized",
    "unauthenticated",
    "not authenticated",
    "not logged in",
    "invalid token",
    "token expired",
    "invalid jwt",
    "jwt expired",
    "jwt malformed",
    "session expired",
    "invalid session",
)

_logger = logging.getLogger(__name__)


def looks_like_session_error(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in _SESSION_MARKERS)


def describe_error(tool_name: str, exc: Exception) -> str:
    """Turn a tool failure into the message returned to the agent."""
    message = str(exc)
    if isinstance(exc, NotAuthenticatedError):
        return SESSION_EXPIRED_MESSAGE
    if isinstance(exc, (GraphQLError, AuthError)) and looks_like_session_error(message):
        return SESSION_EXPIRED_MESSAGE
    return f"Error in {tool_name}: {message}"


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


def list_tool_specs() -> list[Tool]:
    return [
        Tool(
            name=tool.name,
            description=tool.description,
            inputSchema=tool.input_schema(),
        )
        for tool in ALL_TOOLS
    ]


async def dispatch_tool(
    context: ToolContext, name: str, arguments: dict[str, object] | None
) -> list[TextContent]:
    """Validate arguments, run the tool and frame its result as text."""
    tool = TOOLS_BY_NAME.get(name)
    if tool is None:
        _logger.warning("Unknown tool requested: %s", name)
        return _text(
            f"Unknown tool '{name}'. Available tools: {', '.join(TOOLS_BY_NAME)}"
        )

    _logger.info("Tool invocation: %s", name)
    try:
        result = await tool.invoke(context, arguments or {})
    except PydanticValidationError as exc:
        return _text(f"Invalid arguments for {name}: {exc}")
    except JobFailedError as exc:
        _logger.warning("Tool %s failed: %s", name, exc)
        payload = failed_job_payload(exc, context.storage)
        payload["error"] = describe_error(name, exc)
        return _text(json.dumps(payload, indent=2, default=str))
    except Exception as exc:
        _logger.warning("Tool %s failed: %s", name, exc)
        return _text(describe_error(name, exc))
    return _text(json.dumps(result, indent=2, default=str))


def create_server(container: AppContainer) -> Server:
    """Create the MCP server bound to a container."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def handle_list_tools() -> list[Tool]:
        return list_tool_specs()

    @server.call_tool()
    async def handle_call_tool(
        name: str, arguments: dict[str, object]
    ) -> list[TextContent]:
        return await dispatch_tool(container.tool_context, name, arguments)

    return server


async def run_stdio(container: AppContainer) -> None:
    """Serve MCP over stdio until the client disconnects."""
    server = create_server(container)
    _logger.info(
        "Vizcom MCP server running (organization %s)",
        container.session.organization_id,
    )
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream, write_stream, server.create_initialization_options()
            )
    finally:
        await container.close_resources()
