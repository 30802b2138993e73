"""Message models: the raw transport message, the validated Envelope and Reply."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    DEFAULT_NAME_ATTRIBUTE,
    DEFAULT_VERSION_ATTRIBUTE,
    LIBRARY_VERSION,
)
from .exceptions import MalformedEnvelopeError
from .serialization import BodyCodec
from .versioning import is_valid_version

_codec = BodyCodec()


class ReceivedMessage(BaseModel):
    """A message exactly as the transport delivered it.

    Processors receive this in every lifecycle stage.
    """

    model_config = ConfigDict(frozen=True)

    message_id: str
    receipt_handle: str
    body: str = ""
    attributes: dict[str, str] = Field(default_factory=dict)


class Envelope(BaseModel):
    """Immutable, validated queue message.

    ``name`` selects the processor; ``version`` records the library version
    that produced the message. Both are copies of attribute values.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    receipt_handle: str | None = None
    body: str = ""
    attributes: dict[str, str] = Field(default_factory=dict)
    name: str = Field(..., min_length=1, description="Processor registry key")
    version: str = Field(..., min_length=1, description="Producer library version")

    @classmethod
    def parse(
        cls,
        raw: ReceivedMessage,
        *,
        name_attribute: str = DEFAULT_NAME_ATTRIBUTE,
        version_attribute: str = DEFAULT_VERSION_ATTRIBUTE,
    ) -> Envelope:
        """Build an Envelope from a received message.

        Raises:
            MalformedEnvelopeError: If the name or version attribute is
                missing or blank, or the version is not a semantic version.
        """
        name = raw.attributes.get(name_attribute)
        if not name or not name.strip():
            raise MalformedEnvelopeError(
                f"Message does not contain the {name_attribute!r} attribute",
                message_id=raw.message_id,
            )
        version = raw.attributes.get(version_attribute)
        if not version or not version.strip():
            raise MalformedEnvelopeError(
                f"Message does not contain the {version_attribute!r} attribute",
                message_id=raw.message_id,
            )
        if not is_valid_version(version):
            raise MalformedEnvelopeError(
                f"Message version {version!r} is not a semantic version",
                message_id=raw.message_id,
            )
        return cls(
            id=raw.message_id,
            receipt_handle=raw.receipt_handle,
            body=raw.body,
            attributes=dict(raw.attributes),
            name=name,
            version=version,
        )

    @classmethod
    def create(
        cls,
        name: str,
        body: Any = "",
        attributes: dict[str, str] | None = None,
        *,
        name_attribute: str = DEFAULT_NAME_ATTRIBUTE,
        version_attribute: str = DEFAULT_VERSION_ATTRIBUTE,
    ) -> Envelope:
        """Build an outbound Envelope stamped with *name* and the library version.

        Non-string bodies are JSON encoded. Caller attributes replace or add
        keys, except the name and version keys which always keep the values
        set here.
        """
        merged: dict[str, str] = {
            name_attribute: name,
            version_attribute: LIBRARY_VERSION,
        }
        for key, value in (attributes or {}).items():
            if key in (name_attribute, version_attribute):
                continue
            merged[key] = value
        return cls(
            body=_codec.serialize(body),
            attributes=merged,
            name=name,
            version=LIBRARY_VERSION,
        )


class Reply(BaseModel):
    """An outgoing message and the queue it should be sent to."""

    model_config = ConfigDict(frozen=True)

    message: Envelope
    reply_to_queue_url: str | None = None


__all__ = ["Envelope", "ReceivedMessage", "Reply"]
