"""Processor registry: message name -> (model type, processor factory)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import PydanticSchemaGenerationError, TypeAdapter

from .exceptions import HandlerRegistrationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from .processor import QueueProcessor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryEntry:
    """A registered message type."""

    name: str
    model_type: Any
    factory: Callable[[], QueueProcessor[Any]]
    adapter: TypeAdapter[Any] = field(repr=False, compare=False)

    def create_processor(self) -> QueueProcessor[Any]:
        """Return a new processor instance for one message."""
        return self.factory()


class ProcessorRegistry:
    """Maps message names to the model and processor that handle them.

    Registration happens during setup. Passing a processor *class* as the
    factory is the common case; any zero-argument callable returning a
    :class:`~queue_broker.processor.QueueProcessor` works.

    **Conflict detection:** registering a second processor for the same
    name raises ``HandlerRegistrationError``. Once :meth:`freeze` has been
    called (the broker does this when fetching starts) no further
    registrations are accepted.
    """

    def __init__(self) -> None:
        self._entries: dict[str, RegistryEntry] = {}
        self._frozen = False

    # ── Registration ─────────────────────────────────────────────

    def register(
        self,
        name: str,
        model_type: Any,
        factory: Callable[[], QueueProcessor[Any]],
    ) -> ProcessorRegistry:
        if self._frozen:
            msg = f"Cannot register {name!r}: registry is frozen"
            raise HandlerRegistrationError(msg)
        if not name or not name.strip():
            raise HandlerRegistrationError("Message name must be a non-empty string")
        if not callable(factory):
            msg = f"Processor factory for {name!r} is not callable"
            raise HandlerRegistrationError(msg)
        existing = self._entries.get(name)
        if existing is not None:
            msg = (
                f"Duplicate processor for message {name!r}: "
                f"{_describe(existing.factory)} already registered, "
                f"cannot register {_describe(factory)}"
            )
            raise HandlerRegistrationError(msg)
        try:
            adapter: TypeAdapter[Any] = TypeAdapter(model_type)
        except PydanticSchemaGenerationError as e:
            msg = f"Cannot decode message {name!r} into {_describe(model_type)}: {e}"
            raise HandlerRegistrationError(msg) from e
        self._entries[name] = RegistryEntry(
            name=name,
            model_type=model_type,
            factory=factory,
            adapter=adapter,
        )
        logger.debug(
            "Registered processor %s -> %s (%s)",
            name,
            _describe(factory),
            _describe(model_type),
        )
        return self

    def freeze(self) -> None:
        """Reject any further registrations."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ── Lookup ───────────────────────────────────────────────────

    def lookup(self, name: str) -> RegistryEntry | None:
        return self._entries.get(name)

    def has(self, name: str) -> bool:
        return name in self._entries

    def names(self) -> list[str]:
        """Return the registered message names in registration order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def _describe(obj: Any) -> str:
    return getattr(obj, "__name__", None) or repr(obj)


__all__ = ["ProcessorRegistry", "RegistryEntry"]
