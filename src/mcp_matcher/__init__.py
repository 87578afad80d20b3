"""MCP Matcher: find the MCP best suited to a natural-language task."""

__version__ = "0.1.0"
