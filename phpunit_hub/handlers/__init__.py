"""Registry for MCP tool definitions and handlers."""

# Tool definitions and handlers
from .discover_tests import (
    TOOL_DEFINITION as DISCOVER_TESTS_TOOL,
    handle as handle_discover_tests,
)

from .run_tests import (
    TOOL_DEFINITION as RUN_TESTS_TOOL,
    handle as handle_run_tests,
)

from .run_failed_tests import (
    TOOL_DEFINITION as RUN_FAILED_TESTS_TOOL,
    handle as handle_run_failed_tests,
)

from .stop_tests import (
    TOOL_DEFINITION as STOP_TESTS_TOOL,
    handle as handle_stop_tests,
)

from .get_coverage import (
    TOOL_DEFINITION as GET_COVERAGE_TOOL,
    handle as handle_get_coverage,
)

from .get_file_coverage import (
    TOOL_DEFINITION as GET_FILE_COVERAGE_TOOL,
    handle as handle_get_file_coverage,
)

from .server_info import (
    TOOL_DEFINITION as SERVER_INFO_TOOL,
    handle as handle_server_info,
)


# All tool definitions
TOOLS = [
    DISCOVER_TESTS_TOOL,
    RUN_TESTS_TOOL,
    RUN_FAILED_TESTS_TOOL,
    STOP_TESTS_TOOL,
    GET_COVERAGE_TOOL,
    GET_FILE_COVERAGE_TOOL,
    SERVER_INFO_TOOL,
]

# Tool name to handler mapping
HANDLERS = {
    "discover_tests": handle_discover_tests,
    "run_tests": handle_run_tests,
    "run_failed_tests": handle_run_failed_tests,
    "stop_tests": handle_stop_tests,
    "get_coverage": handle_get_coverage,
    "get_file_coverage": handle_get_file_coverage,
    "server_info": handle_server_info,
}


__all__ = [
    # Tool definitions
    "TOOLS",
    "DISCOVER_TESTS_TOOL",
    "RUN_TESTS_TOOL",
    "RUN_FAILED_TESTS_TOOL",
    "STOP_TESTS_TOOL",
    "GET_COVERAGE_TOOL",
    "GET_FILE_COVERAGE_TOOL",
    "SERVER_INFO_TOOL",
    # Handlers
    "HANDLERS",
    "handle_discover_tests",
    "handle_run_tests",
    "handle_run_failed_tests",
    "handle_stop_tests",
    "handle_get_coverage",
    "handle_get_file_coverage",
    "handle_server_info",
]
