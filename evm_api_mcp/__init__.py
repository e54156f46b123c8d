"""EVM data API client with MCP tool publication."""

__version__ = "0.1.0"
