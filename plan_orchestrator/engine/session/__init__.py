"""Session lifecycle management."""

from .manager import CANCELLED_ERROR, ExecutionSessionManager

__all__ = ["CANCELLED_ERROR", "ExecutionSessionManager"]
