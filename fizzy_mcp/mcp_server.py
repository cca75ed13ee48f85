import asyncio
import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from .logging_config import configure_logging
from .tool_router import ToolRouter
from .tool_schemas import TOOLS

logger = logging.getLogger(__name__)


class FizzyMCPServer:
    def __init__(self, router: ToolRouter | None = None):
        self.router = router or ToolRouter()
        self.server = Server("fizzy-mcp-server")
        self._setup_handlers()

    def _setup_handlers(self):
        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return [Tool(name=t["name"], description=t["description"], inputSchema=t["input_schema"]) for t in TOOLS]

        # The router validates arguments itself so it can report every failing field.
        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
            return CallToolResult.model_validate(await self.router.call(name, arguments))

    async def run(self):
        try:
            async with stdio_server() as (read_stream, write_stream):
                logger.info("Fizzy MCP server running on stdio")
                await self.server.run(read_stream, write_stream, self.server.create_initialization_options())
        finally:
            await self.router.cache.aclose()


def main():
    import argparse

    parser = argparse.ArgumentParser(
        description="Fizzy MCP Server",
        epilog="Credentials are read from FIZZY_TOKEN/FIZZY_URL or ~/.claude/plugins/fizzy/config.json on every call.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    configure_logging(verbose=args.verbose)
    server = FizzyMCPServer()
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
