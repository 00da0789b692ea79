"""Stratus X1 reasoning tools exposed over MCP."""

__version__ = "1.0.0"
