"""Google Calendar tools served over MCP."""

__version__ = "0.1.0"
