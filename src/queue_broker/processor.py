"""Processor base class: the four-stage message lifecycle."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from .envelope import ReceivedMessage, Reply

TModel = TypeVar("TModel")


class QueueProcessor(ABC, Generic[TModel]):
    """Base class for message processors.

    A fresh instance is created for every message, so instances may keep
    per-message state. The broker calls the stages in order:

    1. ``received`` — always, before anything else.
    2. ``validate`` — with the body decoded into ``TModel``. Return the
       (possibly modified) model to continue, or ``None`` to mark the
       message invalid and stop.
    3. ``process`` — with the validated model. Return a :class:`Reply` to
       have the broker send it.
    4. ``error`` — only if one of the stages above (or body decoding, or
       sending the reply) raised.

    Usage::

        class OrderPlacedProcessor(QueueProcessor[OrderPlaced]):
            async def received(self, message): ...

            async def validate(self, message, body):
                return body if body.quantity > 0 else None

            async def process(self, message, model):
                ...
                return None

            async def error(self, message, exception): ...

        broker.register("OrderPlaced", OrderPlaced, OrderPlacedProcessor)
    """

    @abstractmethod
    async def received(self, message: ReceivedMessage) -> None:
        """Called first for every message routed to this processor."""
        ...

    @abstractmethod
    async def validate(self, message: ReceivedMessage, body: TModel) -> TModel | None:
        """Check the decoded body; ``None`` halts processing without error."""
        ...

    @abstractmethod
    async def process(self, message: ReceivedMessage, model: TModel) -> Reply | None:
        """Run the business logic for the message."""
        ...

    @abstractmethod
    async def error(self, message: ReceivedMessage, exception: Exception) -> None:
        """React to a failure in an earlier stage.

        Exceptions raised here are not caught by the broker.
        """
        ...


__all__ = ["QueueProcessor", "TModel"]
