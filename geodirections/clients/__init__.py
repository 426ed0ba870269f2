"""API clients for external services."""

from .directions import Directions, user_agent

__all__ = [
    "Directions",
    "user_agent",
]
