"""InMemoryQueueTransport — IQueueTransport with assertion helpers for tests."""

from __future__ import annotations

import itertools
import uuid
from collections import defaultdict, deque

from ..constants import HTTP_OK
from ..envelope import ReceivedMessage
from ..ports import DeleteResult, IQueueTransport, ReceiveResult, SendResult


class InMemoryQueueTransport(IQueueTransport):
    """In-memory queue service for tests and local runs.

    Received messages move to an in-flight set keyed by receipt handle until
    deleted; they are never redelivered. Every call is recorded so tests can
    assert on ``receive_calls``, ``sent`` and ``deleted``. Set
    ``receive_status``, ``send_status`` or ``delete_status`` to simulate a
    rejected call.
    """

    def __init__(self) -> None:
        self._queues: dict[str, deque[ReceivedMessage]] = defaultdict(deque)
        self._in_flight: dict[str, ReceivedMessage] = {}
        self._receipts = itertools.count(1)
        self.receive_calls: list[tuple[str, int, int]] = []
        self.sent: list[tuple[str, str, dict[str, str]]] = []
        self.deleted: list[tuple[str, str]] = []
        self.receive_status = HTTP_OK
        self.send_status = HTTP_OK
        self.delete_status = HTTP_OK
        self.healthy = True

    def enqueue(
        self,
        queue_url: str,
        body: str = "",
        attributes: dict[str, str] | None = None,
        *,
        message_id: str | None = None,
    ) -> ReceivedMessage:
        """Put a message on *queue_url* as if a producer had sent it."""
        message = ReceivedMessage(
            message_id=message_id or str(uuid.uuid4()),
            receipt_handle=f"receipt-{next(self._receipts)}",
            body=body,
            attributes=dict(attributes or {}),
        )
        self._queues[queue_url].append(message)
        return message

    def pending(self, queue_url: str) -> list[ReceivedMessage]:
        """Messages on *queue_url* that have not been received yet."""
        return list(self._queues.get(queue_url, ()))

    def in_flight(self) -> list[ReceivedMessage]:
        """Messages received but not deleted."""
        return list(self._in_flight.values())

    async def receive(
        self, queue_url: str, max_messages: int, wait_seconds: int
    ) -> ReceiveResult:
        self.receive_calls.append((queue_url, max_messages, wait_seconds))
        if self.receive_status != HTTP_OK:
            return ReceiveResult(status_code=self.receive_status)
        queue = self._queues[queue_url]
        batch: list[ReceivedMessage] = []
        while queue and len(batch) < max_messages:
            message = queue.popleft()
            self._in_flight[message.receipt_handle] = message
            batch.append(message)
        return ReceiveResult(status_code=HTTP_OK, messages=batch)

    async def send(
        self, queue_url: str, body: str, attributes: dict[str, str]
    ) -> SendResult:
        if self.send_status != HTTP_OK:
            return SendResult(status_code=self.send_status)
        self.sent.append((queue_url, body, dict(attributes)))
        message = self.enqueue(queue_url, body, attributes)
        return SendResult(status_code=HTTP_OK, message_id=message.message_id)

    async def delete(self, queue_url: str, receipt_handle: str) -> DeleteResult:
        if self.delete_status != HTTP_OK:
            return DeleteResult(status_code=self.delete_status)
        self._in_flight.pop(receipt_handle, None)
        self.deleted.append((queue_url, receipt_handle))
        return DeleteResult(status_code=HTTP_OK)

    async def health_check(self) -> bool:
        return self.healthy
