"""Service layer shared by the REST API and the MCP server."""

from protoforge.service.container import ServiceContainer

__all__ = ["ServiceContainer"]
