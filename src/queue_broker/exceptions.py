"""Exceptions for queue-broker."""

from __future__ import annotations


class QueueBrokerError(Exception):
    """Root exception for the queue-broker package."""


class MalformedEnvelopeError(QueueBrokerError):
    """Raised when a raw message lacks the required name or version attribute."""

    def __init__(self, message: str, message_id: str | None = None) -> None:
        self.message_id = message_id
        super().__init__(message)


class HandlerRegistrationError(QueueBrokerError):
    """Raised when a processor registration conflicts with an existing one.

    Usage: ProcessorRegistry raises this for duplicate message names and for
    registrations attempted after the registry has been frozen.
    """


class BrokerConfigurationError(QueueBrokerError):
    """Raised when the broker is used without the configuration it needs."""


class BodySerializationError(QueueBrokerError):
    """Raised when a message body cannot be encoded or decoded."""


class TransportError(QueueBrokerError):
    """Raised when the queue transport answers with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        status_code: int | None = None,
        queue_url: str | None = None,
    ) -> None:
        self.operation = operation
        self.status_code = status_code
        self.queue_url = queue_url
        super().__init__(message)


class TransportConnectionError(TransportError):
    """Raised when connectivity to the queue service fails."""
