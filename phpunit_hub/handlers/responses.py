"""Shared response helpers for MCP handlers."""

from __future__ import annotations

import json

from mcp.types import TextContent

from ..services import ServiceResult


def json_response(payload: dict) -> list[TextContent]:
    """Single JSON text block."""
    return [TextContent(type="text", text=json.dumps(payload, indent=2))]


def error_response(result: ServiceResult) -> list[TextContent]:
    """Create error response from failed ServiceResult."""
    return [TextContent(type="text", text=f"Error: {result.error.message}")]


def result_response(result: ServiceResult) -> list[TextContent]:
    """JSON for a successful result whose data is a dict, else the error."""
    if not result.success:
        return error_response(result)
    return json_response(result.data)
