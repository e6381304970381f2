"""MCP Server Services: Session and Protocol management."""

from .protocol import ProtocolService
from .session import SessionService

__all__ = [
    "SessionService",
    "ProtocolService",
]
