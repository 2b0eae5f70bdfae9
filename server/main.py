# server/main.py
import logging
import sys
from typing import Optional

from fastmcp import FastMCP

from notevault.config import Settings
from notevault.di import Container, build_container
from notevault.errors import ConfigurationError
from notevault.logging import configure_logging
from server.tools.notes import NoteToolHandlers, register_note_tools

logger = logging.getLogger("server.main")


def create_app(container: Optional[Container] = None) -> FastMCP:
    """
    Build DI container, create FastMCP host, and register tools.
    Keep the server (protocol) separate from tool/service logic.
    """
    container = container or build_container()

    mcp = FastMCP("mcp-obsidian", version="1.0.0")

    # Register tools (thin adapters)
    register_note_tools(mcp, NoteToolHandlers(container.note_service))

    return mcp


def main() -> None:
    settings = Settings()
    configure_logging(settings.LOG_LEVEL)
    try:
        container = build_container(settings)
    except ConfigurationError as e:
        logger.error("Error: %s", e)
        sys.exit(1)

    app = create_app(container)
    logger.info("MCP Obsidian Server running on stdio")
    logger.info("Allowed directories: %s", container.roots.describe())
    # stdio transport: client (agent/IDE) launches this process and speaks JSON-RPC on stdin/stdout
    app.run(transport="stdio")


if __name__ == "__main__":
    main()
