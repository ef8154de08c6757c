"""MCP integration."""
