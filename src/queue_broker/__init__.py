"""Queue message broker: fetch, validate, route and acknowledge queue messages."""

from __future__ import annotations

from .broker import FetchStats, QueueBroker
from .constants import (
    DEFAULT_NAME_ATTRIBUTE,
    DEFAULT_VERSION_ATTRIBUTE,
    LIBRARY_VERSION,
)
from .envelope import Envelope, ReceivedMessage, Reply
from .exceptions import (
    BodySerializationError,
    BrokerConfigurationError,
    HandlerRegistrationError,
    MalformedEnvelopeError,
    QueueBrokerError,
    TransportConnectionError,
    TransportError,
)
from .memory import InMemoryQueueTransport
from .ports import (
    DeleteResult,
    IQueueBroker,
    IQueueTransport,
    ReceiveResult,
    SendResult,
)
from .processor import QueueProcessor
from .registry import ProcessorRegistry, RegistryEntry
from .serialization import BodyCodec
from .settings import BrokerSettings

__version__ = LIBRARY_VERSION

__all__ = [
    "DEFAULT_NAME_ATTRIBUTE",
    "DEFAULT_VERSION_ATTRIBUTE",
    "LIBRARY_VERSION",
    "BodyCodec",
    "BodySerializationError",
    "BrokerConfigurationError",
    "BrokerSettings",
    "DeleteResult",
    "Envelope",
    "FetchStats",
    "HandlerRegistrationError",
    "IQueueBroker",
    "IQueueTransport",
    "InMemoryQueueTransport",
    "MalformedEnvelopeError",
    "ProcessorRegistry",
    "QueueBroker",
    "QueueBrokerError",
    "QueueProcessor",
    "ReceiveResult",
    "ReceivedMessage",
    "RegistryEntry",
    "Reply",
    "SendResult",
    "TransportConnectionError",
    "TransportError",
]
