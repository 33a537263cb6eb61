"""MCP handler for the get_coverage tool (delegates to CoverageService)."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ..context import HubContext
from ..services import ErrorCode, ServiceResult
from .responses import error_response, result_response

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="get_coverage",
    description=(
        "Get statement coverage of the latest run started with coverage "
        "enabled; earlier reports are deleted when a new one starts. "
        "Only files under the source directories included in phpunit.xml "
        "are reported."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "run_id": {
                "type": "string",
                "description": "Id returned by run_tests"
            }
        },
        "required": ["run_id"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict, context: HubContext) -> list[TextContent]:
    run_id = arguments.get("run_id")
    if not run_id:
        return error_response(ServiceResult.fail(ErrorCode.MISSING_INPUT, "'run_id' is required"))

    coverage_file = context.runs.coverage_file(run_id)
    if coverage_file is None:
        return error_response(ServiceResult.fail(
            ErrorCode.UNKNOWN_RUN,
            f"No coverage report is available for run {run_id}"
        ))

    result = context.coverage.report(coverage_file)
    return result_response(result.map(lambda report: report.to_dict()))
