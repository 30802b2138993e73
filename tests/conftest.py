"""Pytest fixtures for queue-broker tests."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest
from pydantic import BaseModel

# Ensure the package is importable when running pytest from the repo root
# without an editable install.
_src = Path(__file__).resolve().parent.parent / "src"
if _src.is_dir() and str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from queue_broker import (  # noqa: E402
    DEFAULT_NAME_ATTRIBUTE,
    DEFAULT_VERSION_ATTRIBUTE,
    LIBRARY_VERSION,
    InMemoryQueueTransport,
    QueueBroker,
    QueueProcessor,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from queue_broker import ReceivedMessage, Reply

QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123/orders"
REPLY_QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123/order-replies"


class OrderPlaced(BaseModel):
    order_id: str
    quantity: int = 1


def attributes_for(
    name: str | None = "OrderPlaced",
    version: str | None = LIBRARY_VERSION,
    **extra: str,
) -> dict[str, str]:
    attrs: dict[str, str] = dict(extra)
    if name is not None:
        attrs[DEFAULT_NAME_ATTRIBUTE] = name
    if version is not None:
        attrs[DEFAULT_VERSION_ATTRIBUTE] = version
    return attrs


@dataclass
class CallLog:
    """Shared record of every stage call made on recording processors."""

    calls: list[tuple[str, str]] = field(default_factory=list)
    instances: list[Any] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)

    def stages(self, stage: str) -> list[str]:
        return [message_id for s, message_id in self.calls if s == stage]


def make_processor(
    log: CallLog,
    *,
    invalid: bool = False,
    reply: Callable[[OrderPlaced], Reply | None] | None = None,
    fail_on: str | None = None,
    fail_in_error: bool = False,
) -> type[QueueProcessor[OrderPlaced]]:
    """Build a processor class that records its stage calls in *log*."""

    class RecordingProcessor(QueueProcessor[OrderPlaced]):
        def __init__(self) -> None:
            log.instances.append(self)

        def _record(self, stage: str, message: ReceivedMessage) -> None:
            log.calls.append((stage, message.message_id))
            if fail_on == stage:
                raise RuntimeError(f"{stage} failed")

        async def received(self, message: ReceivedMessage) -> None:
            self._record("received", message)

        async def validate(
            self, message: ReceivedMessage, body: OrderPlaced
        ) -> OrderPlaced | None:
            self._record("validate", message)
            return None if invalid else body

        async def process(
            self, message: ReceivedMessage, model: OrderPlaced
        ) -> Reply | None:
            self._record("process", message)
            return reply(model) if reply is not None else None

        async def error(self, message: ReceivedMessage, exception: Exception) -> None:
            log.calls.append(("error", message.message_id))
            log.errors.append(exception)
            if fail_in_error:
                raise RuntimeError("error stage failed")

    return RecordingProcessor


@pytest.fixture
def call_log() -> CallLog:
    return CallLog()


@pytest.fixture
def transport() -> InMemoryQueueTransport:
    return InMemoryQueueTransport()


@pytest.fixture
def broker(transport: InMemoryQueueTransport) -> QueueBroker:
    return QueueBroker(transport).configure(
        lambda s: setattr(s, "queue_url", QUEUE_URL)
    )
