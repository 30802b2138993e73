"""Tests for BrokerSettings validation and QueueBroker.configure."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from queue_broker import BrokerSettings, InMemoryQueueTransport, QueueBroker


def test_defaults() -> None:
    s = BrokerSettings()
    assert s.max_number_of_messages == 5
    assert s.wait_time_seconds == 0
    assert s.queue_url is None
    assert s.fetch_until_empty is True
    assert s.delete_if_success is True
    assert s.delete_if_invalid is True
    assert s.delete_if_error is True
    assert s.name_attribute == "qbMessageName"
    assert s.version_attribute == "qbMessageVersion"


@pytest.mark.parametrize("value", [1, 5, 10])
def test_batch_size_in_range(value: int) -> None:
    s = BrokerSettings()
    s.max_number_of_messages = value
    assert s.max_number_of_messages == value


@pytest.mark.parametrize("value", [0, 11, -1])
def test_batch_size_out_of_range_fails_on_assignment(value: int) -> None:
    s = BrokerSettings()
    with pytest.raises(ValidationError, match="max_number_of_messages"):
        s.max_number_of_messages = value
    assert s.max_number_of_messages == 5


@pytest.mark.parametrize("value", [-1, 21])
def test_wait_time_out_of_range_fails_on_assignment(value: int) -> None:
    s = BrokerSettings()
    with pytest.raises(ValidationError, match="wait_time_seconds"):
        s.wait_time_seconds = value


def test_wait_time_bounds_accepted() -> None:
    s = BrokerSettings(wait_time_seconds=20)
    s.wait_time_seconds = 0
    assert s.wait_time_seconds == 0


def test_out_of_range_constructor_argument_fails() -> None:
    with pytest.raises(ValidationError):
        BrokerSettings(max_number_of_messages=11)


def test_unknown_field_rejected() -> None:
    with pytest.raises(ValidationError):
        BrokerSettings(batch_size=3)  # type: ignore[call-arg]


def test_attribute_keys_must_differ() -> None:
    s = BrokerSettings()
    with pytest.raises(ValidationError):
        s.version_attribute = s.name_attribute


def test_configure_applies_mutator() -> None:
    broker = QueueBroker(InMemoryQueueTransport())

    def setup(s: BrokerSettings) -> None:
        s.queue_url = "q"
        s.max_number_of_messages = 10
        s.delete_if_error = False

    assert broker.configure(setup) is broker
    assert broker.settings.queue_url == "q"
    assert broker.settings.max_number_of_messages == 10
    assert broker.settings.delete_if_error is False


def test_configure_failure_keeps_previous_settings() -> None:
    broker = QueueBroker(InMemoryQueueTransport())
    broker.configure(lambda s: setattr(s, "queue_url", "q1"))

    def bad(s: BrokerSettings) -> None:
        s.queue_url = "q2"
        s.max_number_of_messages = 0

    with pytest.raises(ValidationError):
        broker.configure(bad)
    assert broker.settings.queue_url == "q1"
    assert broker.settings.max_number_of_messages == 5
