"""State dataclasses shared across the relay server."""

from .session import Member, Session

__all__ = ["Member", "Session"]
