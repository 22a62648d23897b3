"""
Service layer that validates tool arguments and orchestrates the domain logic.
"""

from .toolkit import ToolkitService, ToolResult, ToolDefinition, render_payload

__all__ = ["ToolkitService", "ToolResult", "ToolDefinition", "render_payload"]
