"""BodyCodec — JSON message bodies to and from typed models via pydantic."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .exceptions import BodySerializationError


@lru_cache(maxsize=256)
def _adapter_for(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


class BodyCodec:
    """Serialize/deserialize message bodies as JSON.

    Deserialization validates the decoded JSON against the target type, so
    pydantic models, dataclasses, TypedDicts and plain containers all work.
    """

    def adapter(self, target: Any) -> TypeAdapter[Any]:
        """Return a (cached) TypeAdapter for *target*."""
        if isinstance(target, TypeAdapter):
            return target
        try:
            return _adapter_for(target)
        except TypeError:
            # Unhashable type expressions bypass the cache.
            return TypeAdapter(target)

    def deserialize(self, body: str, target: Any) -> Any:
        """Decode *body* into an instance of *target* (type or TypeAdapter)."""
        try:
            return self.adapter(target).validate_json(body)
        except (PydanticValidationError, TypeError, ValueError) as e:
            raise BodySerializationError(str(e)) from e

    def serialize(self, obj: Any) -> str:
        """Encode *obj* to a JSON string. Strings pass through unchanged."""
        if isinstance(obj, str):
            return obj
        try:
            return self.adapter(type(obj)).dump_json(obj).decode("utf-8")
        except (PydanticValidationError, TypeError, ValueError) as e:
            raise BodySerializationError(str(e)) from e
