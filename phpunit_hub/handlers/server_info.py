"""MCP handler for the server_info tool."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ..constants import STATUS_PATH
from ..context import HubContext
from .responses import result_response

TOOL_DEFINITION = Tool(
    name="server_info",
    description=(
        "Describe the hub: project root, PHPUnit binary and version, "
        "status channel address and whether a run is in progress."
    ),
    inputSchema={
        "type": "object",
        "properties": {}
    }
)


async def handle(arguments: dict, context: HubContext) -> list[TextContent]:
    def describe(info) -> dict:
        response = info.to_dict()
        response["websocket"] = f"ws://{context.config.host}:{context.config.port}{STATUS_PATH}"
        response["running"] = context.runs.is_running
        response["activeRunId"] = context.runs.active_run_id
        response["viewers"] = len(context.hub)
        return response

    return result_response(context.discovery.project_info().map(describe))
