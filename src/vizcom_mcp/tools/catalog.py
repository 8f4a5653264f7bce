"""Registry of every tool the server exposes."""

from vizcom_mcp.tools import browse, export, generate, modify, render
from vizcom_mcp.tools.base import ToolDefinition

ALL_TOOLS: list[ToolDefinition] = [
    *browse.TOOLS,
    *generate.TOOLS,
    *modify.TOOLS,
    *render.TOOLS,
    *export.TOOLS,
]

TOOLS_BY_NAME: dict[str, ToolDefinition] = {tool.name: tool for tool in ALL_TOOLS}
