"""In-memory transport for testing."""

from __future__ import annotations

from .transport import InMemoryQueueTransport

__all__ = ["InMemoryQueueTransport"]
