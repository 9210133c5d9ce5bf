"""MCP server for Figma files and image exports."""

__version__ = "0.4.1"
