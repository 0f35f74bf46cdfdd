"""Session and plan store contracts with in-memory implementations."""

from .interfaces import PlanStore, SessionStore
from .memory import InMemoryPlanStore, InMemorySessionStore

__all__ = [
    "InMemoryPlanStore",
    "InMemorySessionStore",
    "PlanStore",
    "SessionStore",
]
