from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from .constants import HTTP_OK
from .envelope import ReceivedMessage

if TYPE_CHECKING:
    from collections.abc import Callable

    from .broker import FetchStats
    from .envelope import Envelope
    from .processor import QueueProcessor
    from .settings import BrokerSettings


class _TransportResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status_code: int

    @property
    def ok(self) -> bool:
        return self.status_code == HTTP_OK


class ReceiveResult(_TransportResult):
    messages: list[ReceivedMessage] = Field(default_factory=list)


class SendResult(_TransportResult):
    message_id: str | None = None


class DeleteResult(_TransportResult):
    pass


@runtime_checkable
class IQueueTransport(Protocol):
    """
    Port for the queue service (SQS, in-memory, …).

    Implementations report the service's HTTP-style status instead of raising
    for rejected calls; the broker decides what a non-success status means.
    """

    async def receive(
        self, queue_url: str, max_messages: int, wait_seconds: int
    ) -> ReceiveResult:
        """
        Receive up to *max_messages* from *queue_url*.

        Args:
            queue_url: Queue to read from.
            max_messages: Batch size, 1–10.
            wait_seconds: Long-poll wait, 0–20.
        """
        ...

    async def send(
        self, queue_url: str, body: str, attributes: dict[str, str]
    ) -> SendResult:
        """Send *body* with string *attributes* to *queue_url*."""
        ...

    async def delete(self, queue_url: str, receipt_handle: str) -> DeleteResult:
        """Delete the message identified by *receipt_handle*."""
        ...

    async def health_check(self) -> bool:
        """Return ``True`` if the queue service is reachable."""
        ...


@runtime_checkable
class IQueueBroker(Protocol):
    """
    Port exposed to applications: register processors, configure, fetch.
    """

    def register(
        self,
        name: str,
        model_type: Any,
        factory: Callable[[], QueueProcessor[Any]],
    ) -> IQueueBroker: ...

    def configure(self, mutator: Callable[[BrokerSettings], None]) -> IQueueBroker: ...

    async def send(self, message: Envelope, queue_url: str) -> str | None: ...

    async def delete(self, message: Envelope) -> None: ...

    async def fetch(self) -> FetchStats: ...


__all__ = [
    "DeleteResult",
    "IQueueBroker",
    "IQueueTransport",
    "ReceiveResult",
    "SendResult",
]
