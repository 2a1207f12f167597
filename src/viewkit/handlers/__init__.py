"""Tool invocation handlers."""

from .views import ViewHandler, tool_result

__all__ = ["ViewHandler", "tool_result"]
