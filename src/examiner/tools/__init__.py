"""Read-only file tools for AI models.

Provides the tool protocol, the four policy-gated file operations,
and the registry the MCP server dispatches through.
"""
