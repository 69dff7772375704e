"""MCP tool registration for the codec and table operations."""
