"""MCP handler for the get_file_coverage tool (line coverage of one file)."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ..context import HubContext
from ..services import ErrorCode, ServiceResult
from .responses import error_response, result_response

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="get_file_coverage",
    description=(
        "Get line-by-line coverage of one source file from the Clover report "
        "of a coverage run. Each line of the file is marked 'covered', "
        "'uncovered' or 'neutral' (not executable)."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "run_id": {
                "type": "string",
                "description": "Id returned by run_tests"
            },
            "path": {
                "type": "string",
                "description": "Source file relative to the project root, e.g. 'src/Calc.php'"
            }
        },
        "required": ["run_id", "path"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict, context: HubContext) -> list[TextContent]:
    run_id = arguments.get("run_id")
    path = arguments.get("path")
    if not run_id or not path:
        return error_response(ServiceResult.fail(ErrorCode.MISSING_INPUT, "'run_id' and 'path' are required"))

    coverage_file = context.runs.coverage_file(run_id)
    if coverage_file is None:
        return error_response(ServiceResult.fail(
            ErrorCode.UNKNOWN_RUN,
            f"No coverage report is available for run {run_id}"
        ))

    result = context.coverage.file_report(coverage_file, path)
    return result_response(result.map(lambda lines: lines.to_dict()))
