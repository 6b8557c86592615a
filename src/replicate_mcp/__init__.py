"""MCP server exposing Replicate image generation as a tool."""

__version__ = "0.1.0"
