"""Figma MCP Server.

Read Figma files by file key and export nodes as images. Exported images are
exposed as resources (``figma://file/{file_key}/node/{node_id}.{format}``) and
downloaded lazily on first read.

Tools:
- parse_figma_url, get_file, get_file_nodes
- export_images, list_exported_images
- get_me, help

Transport is selected with MCP_TRANSPORT (``stdio`` by default, or ``http``
on MCP_HOST:MCP_PORT). FIGMA_TOKEN must hold a Figma personal access token.
"""

import sys

from fastmcp import FastMCP
from fastmcp.server.middleware.error_handling import ErrorHandlingMiddleware
from loguru import logger

from figma_server.deps import get_figma_client
from figma_server.middleware.errors import FigmaErrorMiddleware
from figma_server.middleware.logging import LoggingMiddleware
from figma_server.resources import EXPORT_URI_TEMPLATE, read_export
from figma_server.tools.export_images import export_images
from figma_server.tools.get_file import get_file
from figma_server.tools.get_file_nodes import get_file_nodes
from figma_server.tools.get_me import get_me
from figma_server.tools.help import help as help_tool
from figma_server.tools.list_exported_images import list_exported_images
from figma_server.tools.parse_figma_url import parse_figma_url
from figma_server.utils.errors import FigmaAuthError
from figma_server.utils.logging import setup_logger
from figma_server.utils.settings import get_settings

mcp = FastMCP(
    "figma-server",
    instructions="Figma files by file key: parse Figma URLs, read file and node trees with depth control, export nodes as png/jpg/svg/pdf images exposed as resources. Use 'help' for usage instructions.",
    on_duplicate_resources="replace",
)
mcp.add_middleware(ErrorHandlingMiddleware(include_traceback=True))
mcp.add_middleware(LoggingMiddleware())
mcp.add_middleware(FigmaErrorMiddleware())

mcp.tool(parse_figma_url)
mcp.tool(get_file)
mcp.tool(get_file_nodes)
mcp.tool(export_images)
mcp.tool(list_exported_images)
mcp.tool(get_me)
mcp.tool(help_tool)

mcp.resource(
    EXPORT_URI_TEMPLATE,
    name="Figma export",
    description="Image exported from a Figma file with export_images",
    mime_type="application/octet-stream",
)(read_export)


def main() -> None:
    setup_logger()
    settings = get_settings()

    try:
        get_figma_client()
    except FigmaAuthError as exc:
        logger.error(exc.message)
        sys.exit(1)

    logger.info("Starting Figma MCP server")
    transport = settings.MCP_TRANSPORT.lower()
    if transport == "http":
        mcp.run(transport="http", host=settings.MCP_HOST, port=settings.MCP_PORT)
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
