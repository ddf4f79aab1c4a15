"""MCP server for Protoforge."""
