"""
MCP tools: input schemas, the retrieval service, and server registration.
"""

from rescuedogs_mcp.tools.service import RescueDogsService, ToolResponse

__all__ = ["RescueDogsService", "ToolResponse"]
