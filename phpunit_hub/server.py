"""
Entrypoint for phpunit-hub.

This module is intentionally thin:
- configures logging from HubConfig
- builds the MCP server and routes tool calls to handlers
- runs the WebSocket status server and the MCP stdio server on one loop
"""

from __future__ import annotations

import asyncio
import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent

from .config import HubConfig
from .context import HubContext
from .handlers import HANDLERS, TOOLS
from .hub import serve_status

logger = logging.getLogger(__name__)


# =============================================================================
# Tool Registration
# =============================================================================

def create_server(context: HubContext) -> Server:
    """Create the MCP server with every tool bound to context."""
    server = Server("phpunit-hub")

    @server.list_tools()
    async def list_tools():
        """List all available tools."""
        return TOOLS

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        """Route tool calls to appropriate handlers."""
        return await dispatch(context, name, arguments)

    return server


# =============================================================================
# Tool Router
# =============================================================================

async def dispatch(context: HubContext, name: str, arguments: dict | None) -> list[TextContent]:
    logger.info(f"Tool called: {name}")

    handler = HANDLERS.get(name)

    if handler:
        return await handler(arguments or {}, context)

    return [TextContent(type="text", text=f"Unknown tool: {name}")]


# =============================================================================
# Entry Point
# =============================================================================

def configure_logging(config: HubConfig) -> None:
    # stdout carries the MCP stdio protocol, so logs go to stderr
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def run_server(config: HubConfig | None = None):
    """Run the status server and the MCP server until stdin closes."""
    config = config or HubConfig.from_env()
    configure_logging(config)

    context = HubContext.create(config, asyncio.get_running_loop())
    server = create_server(context)

    logger.info("Starting PHPUnit Hub...")
    logger.info(f"Project root: {config.project_root}")
    logger.info(f"Registered {len(TOOLS)} tools: {[t.name for t in TOOLS]}")

    async with serve_status(context.hub, config.host, config.port):
        logger.info(f"Status channel listening on ws://{config.host}:{config.port}")
        try:
            async with stdio_server() as (read_stream, write_stream):
                await server.run(
                    read_stream,
                    write_stream,
                    server.create_initialization_options()
                )
        finally:
            await shutdown(context)


async def shutdown(context: HubContext) -> None:
    """Stop the active run, delete its reports and close every viewer."""
    if context.runs.is_running:
        context.runs.stop()
        await context.runs.wait()
    context.runs.cleanup()
    await context.hub.close()


def main():
    """Entry point."""
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
