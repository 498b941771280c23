"""Tool registration layer."""

from contextual_retrieval.tools.acrs_tools import register_acrs_tools
from contextual_retrieval.tools.registry import ToolDefinition, ToolRegistry

__all__ = ["ToolDefinition", "ToolRegistry", "register_acrs_tools"]
