"""BrokerSettings — validated broker configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .constants import DEFAULT_NAME_ATTRIBUTE, DEFAULT_VERSION_ATTRIBUTE


class BrokerSettings(BaseModel):
    """Settings for :class:`~queue_broker.broker.QueueBroker`.

    Assignments are validated immediately, so an out-of-range value raises
    ``pydantic.ValidationError`` at the point it is set::

        broker.configure(lambda s: setattr(s, "max_number_of_messages", 11))
        # -> ValidationError
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    max_number_of_messages: int = Field(
        default=5,
        ge=1,
        le=10,
        description="Maximum number of messages returned by one receive call",
    )
    wait_time_seconds: int = Field(
        default=0,
        ge=0,
        le=20,
        description="Long-poll wait for a receive call",
    )
    queue_url: str | None = Field(
        default=None,
        description="Queue to poll; required before fetch or delete",
    )
    fetch_until_empty: bool = True
    delete_if_success: bool = True
    delete_if_invalid: bool = True
    delete_if_error: bool = True
    name_attribute: str = Field(default=DEFAULT_NAME_ATTRIBUTE, min_length=1)
    version_attribute: str = Field(default=DEFAULT_VERSION_ATTRIBUTE, min_length=1)

    @model_validator(mode="after")
    def _distinct_attribute_keys(self) -> BrokerSettings:
        if self.name_attribute == self.version_attribute:
            msg = "name_attribute and version_attribute must differ"
            raise ValueError(msg)
        return self
