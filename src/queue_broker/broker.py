"""QueueBroker — fetch, validate, dispatch and acknowledge queue messages."""

from __future__ import annotations

import enum
import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from .constants import LIBRARY_VERSION
from .envelope import Envelope
from .exceptions import (
    BrokerConfigurationError,
    MalformedEnvelopeError,
    TransportError,
)
from .registry import ProcessorRegistry
from .serialization import BodyCodec
from .settings import BrokerSettings
from .versioning import compare_versions

if TYPE_CHECKING:
    from collections.abc import Callable

    from .envelope import ReceivedMessage
    from .ports import IQueueTransport
    from .processor import QueueProcessor
    from .registry import RegistryEntry

_log = logging.getLogger(__name__)


@dataclass
class FetchStats:
    """Counters describing one fetch cycle."""

    batches: int = 0
    received: int = 0
    malformed: int = 0
    unhandled: int = 0
    succeeded: int = 0
    invalid: int = 0
    failed: int = 0
    deleted: int = 0
    replies_sent: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class _Outcome(enum.Enum):
    SUCCESS = "success"
    INVALID = "invalid"


class QueueBroker:
    """Polls a queue and drives each message through its registered processor.

    Messages are handled one at a time, in the order the transport returned
    them. For every message the broker:

    1. parses it into an :class:`~queue_broker.envelope.Envelope` (malformed
       messages are skipped and left on the queue),
    2. compares the producer version with this library's version and logs a
       warning on mismatch,
    3. looks up the processor by name (unknown names are skipped and left on
       the queue),
    4. runs ``received`` → decode body → ``validate`` → ``process`` on a new
       processor instance and sends the reply, if any,
    5. deletes the message according to the delete policy.

    A failure in step 4 calls the processor's ``error`` stage. Transport
    failures on receive and delete, and failures raised by ``error``
    itself, abort the fetch cycle.

    Usage::

        broker = (
            QueueBroker(SQSTransport(SQSConnectionManager()))
            .register("OrderPlaced", OrderPlaced, OrderPlacedProcessor)
            .configure(lambda s: setattr(s, "queue_url", QUEUE_URL))
        )
        await broker.fetch()
    """

    def __init__(
        self,
        transport: IQueueTransport,
        *,
        settings: BrokerSettings | None = None,
        registry: ProcessorRegistry | None = None,
        codec: BodyCodec | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Configure the broker.

        Args:
            transport: Queue service adapter used for receive, send and delete.
            settings: Initial settings; defaults to ``BrokerSettings()``.
            registry: Processor registry; a new one is created if omitted.
            codec: Body codec used to decode message bodies.
            logger: Logger for broker diagnostics; defaults to the module
                logger. Pass a logger with a ``NullHandler`` to silence it.
        """
        self._transport = transport
        self._settings = settings if settings is not None else BrokerSettings()
        self._registry = registry if registry is not None else ProcessorRegistry()
        self._codec = codec if codec is not None else BodyCodec()
        self._log = logger or _log

    @property
    def settings(self) -> BrokerSettings:
        return self._settings

    @property
    def registry(self) -> ProcessorRegistry:
        return self._registry

    # ── Setup ────────────────────────────────────────────────────

    def register(
        self,
        name: str,
        model_type: Any,
        factory: Callable[[], QueueProcessor[Any]],
    ) -> QueueBroker:
        """Route messages named *name* to processors built by *factory*.

        The body is decoded into *model_type* before ``validate`` is called.
        """
        self._registry.register(name, model_type, factory)
        return self

    def configure(self, mutator: Callable[[BrokerSettings], None]) -> QueueBroker:
        """Apply *mutator* to a copy of the settings and keep the result.

        If the mutator raises (e.g. an out-of-range assignment), the current
        settings are left unchanged.
        """
        updated = self._settings.model_copy(deep=True)
        mutator(updated)
        self._settings = updated
        return self

    def create_message(
        self,
        name: str,
        body: Any = "",
        attributes: dict[str, str] | None = None,
    ) -> Envelope:
        """Build an outbound Envelope using this broker's attribute keys."""
        return Envelope.create(
            name,
            body,
            attributes,
            name_attribute=self._settings.name_attribute,
            version_attribute=self._settings.version_attribute,
        )

    # ── Transport operations ─────────────────────────────────────

    async def send(self, message: Envelope, queue_url: str) -> str | None:
        """Send *message* to *queue_url* and return the assigned message id.

        Raises:
            TransportError: If the queue service rejects the message.
        """
        if not queue_url:
            raise BrokerConfigurationError("A destination queue url is required")
        result = await self._transport.send(
            queue_url, message.body, dict(message.attributes)
        )
        if not result.ok:
            raise TransportError(
                f"Error sending message to queue {queue_url}.",
                operation="send",
                status_code=result.status_code,
                queue_url=queue_url,
            )
        self._log.debug("Sent message %s to queue %s.", result.message_id, queue_url)
        return result.message_id

    async def delete(self, message: Envelope) -> None:
        """Delete a received *message* from the configured queue.

        Raises:
            BrokerConfigurationError: If no queue url is configured or the
                message has no receipt handle.
            TransportError: If the queue service rejects the delete.
        """
        queue_url = self._require_queue_url()
        if not message.receipt_handle:
            raise BrokerConfigurationError(
                f"Message id {message.id} has no receipt handle and cannot be deleted."
            )
        result = await self._transport.delete(queue_url, message.receipt_handle)
        if not result.ok:
            raise TransportError(
                f"Error deleting message id {message.id} from queue {queue_url}.",
                operation="delete",
                status_code=result.status_code,
                queue_url=queue_url,
            )
        self._log.debug("Message id %s deleted from queue.", message.id)

    async def health_check(self) -> bool:
        """Return True if the queue service is reachable."""
        return await self._transport.health_check()

    # ── Fetch loop ───────────────────────────────────────────────

    async def fetch(self) -> FetchStats:
        """Poll the configured queue and process what it returns.

        Repeats while batches are non-empty and ``fetch_until_empty`` is set.

        Raises:
            BrokerConfigurationError: If no queue url is configured.
            TransportError: If a receive or delete call fails.
        """
        queue_url = self._require_queue_url()
        settings = self._settings
        self._registry.freeze()
        stats = FetchStats()

        while True:
            self._log.info("Fetching queue messages from %s.", queue_url)
            received = await self._transport.receive(
                queue_url,
                settings.max_number_of_messages,
                settings.wait_time_seconds,
            )
            if not received.ok:
                raise TransportError(
                    f"Unable to read messages from queue {queue_url}. "
                    f"Queue service responded with code {received.status_code}.",
                    operation="receive",
                    status_code=received.status_code,
                    queue_url=queue_url,
                )
            if not received.messages:
                self._log.info("No messages received from %s.", queue_url)
                break

            stats.batches += 1
            stats.received += len(received.messages)
            self._log.info("Processing %d messages.", len(received.messages))

            for raw in received.messages:
                await self._dispatch(raw, settings, stats)

            if not settings.fetch_until_empty:
                break

        self._log.info("Fetch complete: %s", stats.as_dict())
        return stats

    async def _dispatch(
        self,
        raw: ReceivedMessage,
        settings: BrokerSettings,
        stats: FetchStats,
    ) -> None:
        try:
            envelope = Envelope.parse(
                raw,
                name_attribute=settings.name_attribute,
                version_attribute=settings.version_attribute,
            )
        except MalformedEnvelopeError as e:
            stats.malformed += 1
            self._log.debug(
                "Message id %s does not appear to be a valid broker message "
                "and will be skipped: %s",
                raw.message_id,
                e,
            )
            return

        self._log.debug("Processing message with id %s.", envelope.id)
        self._check_version(envelope)

        entry = self._registry.lookup(envelope.name)
        if entry is None:
            stats.unhandled += 1
            self._log.debug(
                "Skipping message id %s. No processor found for message name %r.",
                envelope.id,
                envelope.name,
            )
            return

        processor = entry.create_processor()
        try:
            outcome = await self._run_stages(processor, entry, raw, stats)
        except Exception as e:  # noqa: BLE001
            stats.failed += 1
            self._log.warning(
                "Processor for message id %s failed: %s",
                envelope.id,
                e,
                exc_info=e,
            )
            self._log.debug(
                "Executing processor error stage for message id %s.", envelope.id
            )
            await processor.error(raw, e)
            if settings.delete_if_error:
                await self._delete(envelope, stats)
            return

        if outcome is _Outcome.INVALID:
            stats.invalid += 1
            if settings.delete_if_invalid:
                await self._delete(envelope, stats)
            return

        stats.succeeded += 1
        if settings.delete_if_success:
            await self._delete(envelope, stats)

    async def _run_stages(
        self,
        processor: QueueProcessor[Any],
        entry: RegistryEntry,
        raw: ReceivedMessage,
        stats: FetchStats,
    ) -> _Outcome:
        message_id = raw.message_id
        self._log.debug("Executing processor received for message id %s.", message_id)
        await processor.received(raw)

        self._log.debug("Deserializing body of message id %s.", message_id)
        body = self._codec.deserialize(raw.body, entry.adapter)

        self._log.debug("Executing processor validation for message id %s.", message_id)
        validated = await processor.validate(raw, body)
        if validated is None:
            self._log.debug(
                "Message with id %s was marked invalid by processor "
                "and execution has stopped.",
                message_id,
            )
            return _Outcome.INVALID

        self._log.debug("Executing processor process for message id %s.", message_id)
        reply = await processor.process(raw, validated)
        if reply is not None and reply.reply_to_queue_url:
            await self.send(reply.message, reply.reply_to_queue_url)
            stats.replies_sent += 1
        return _Outcome.SUCCESS

    async def _delete(self, envelope: Envelope, stats: FetchStats) -> None:
        await self.delete(envelope)
        stats.deleted += 1

    def _check_version(self, envelope: Envelope) -> None:
        comparison = compare_versions(envelope.version, LIBRARY_VERSION)
        if comparison < 0:
            self._log.warning(
                "Message id %s was created using version %s which is older "
                "than this version %s",
                envelope.id,
                envelope.version,
                LIBRARY_VERSION,
            )
        elif comparison > 0:
            self._log.warning(
                "Message id %s was created using version %s which is newer "
                "than this version %s",
                envelope.id,
                envelope.version,
                LIBRARY_VERSION,
            )

    def _require_queue_url(self) -> str:
        queue_url = self._settings.queue_url
        if not queue_url:
            raise BrokerConfigurationError(
                "queue_url must be configured before fetching or deleting messages"
            )
        return queue_url


__all__ = ["FetchStats", "QueueBroker"]
