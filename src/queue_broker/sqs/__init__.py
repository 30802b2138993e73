"""SQS transport adapter (optional extra: queue-broker[sqs])."""

from __future__ import annotations

from .connection import SQSConnectionManager
from .transport import SQSTransport

__all__ = [
    "SQSConnectionManager",
    "SQSTransport",
]
