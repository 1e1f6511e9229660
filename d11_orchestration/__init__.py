"""
D11 Orchestration Domain

Named tool operations over the audit coordinator and scoring engine.
"""

from .tools import TOOL_DESCRIPTIONS, ToolDispatcher, ToolResponse

__all__ = ["ToolDispatcher", "ToolResponse", "TOOL_DESCRIPTIONS"]
