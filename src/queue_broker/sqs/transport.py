"""SQSTransport — IQueueTransport on top of an aiobotocore SQS client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..constants import HTTP_OK
from ..envelope import ReceivedMessage
from ..exceptions import TransportConnectionError
from ..ports import DeleteResult, IQueueTransport, ReceiveResult, SendResult

if TYPE_CHECKING:
    from .connection import SQSConnectionManager

logger = logging.getLogger(__name__)


def _status_of(response: dict[str, Any]) -> int:
    metadata = response.get("ResponseMetadata") or {}
    return int(metadata.get("HTTPStatusCode", HTTP_OK))


def _error_status(e: Exception) -> int | None:
    """Return the HTTP status carried by a botocore ClientError, if any."""
    err = getattr(e, "response", None) or {}
    status = (err.get("ResponseMetadata") or {}).get("HTTPStatusCode")
    return int(status) if status is not None else None


def _to_sqs_attributes(attributes: dict[str, str]) -> dict[str, dict[str, str]]:
    return {
        key: {"DataType": "String", "StringValue": value}
        for key, value in attributes.items()
    }


def _from_sqs_attributes(attributes: dict[str, Any] | None) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, value in (attributes or {}).items():
        string_value = value.get("StringValue") if isinstance(value, dict) else None
        if string_value is not None:
            out[key] = string_value
    return out


def _to_received(msg: dict[str, Any]) -> ReceivedMessage:
    return ReceivedMessage(
        message_id=msg.get("MessageId", ""),
        receipt_handle=msg.get("ReceiptHandle", ""),
        body=msg.get("Body", ""),
        attributes=_from_sqs_attributes(msg.get("MessageAttributes")),
    )


class SQSTransport(IQueueTransport):
    """SQS adapter implementing IQueueTransport.

    Message attributes travel as SQS ``String`` attributes. Rejected calls
    are reported through the result's ``status_code``; only failures that
    never reached the service raise ``TransportConnectionError``.
    """

    def __init__(self, connection: SQSConnectionManager) -> None:
        self._connection = connection

    async def _call(
        self, operation: str, queue_url: str, **kwargs: Any
    ) -> tuple[int, dict[str, Any]]:
        client = await self._connection.get_client()
        try:
            out = await getattr(client, operation)(QueueUrl=queue_url, **kwargs)
        except Exception as e:
            status = _error_status(e)
            if status is None:
                raise TransportConnectionError(
                    str(e), operation=operation, queue_url=queue_url
                ) from e
            logger.debug(
                "SQS %s on %s returned %s: %s", operation, queue_url, status, e
            )
            return status, {}
        return _status_of(out), out

    async def receive(
        self, queue_url: str, max_messages: int, wait_seconds: int
    ) -> ReceiveResult:
        status, out = await self._call(
            "receive_message",
            queue_url,
            MaxNumberOfMessages=max_messages,
            WaitTimeSeconds=wait_seconds,
            MessageAttributeNames=["All"],
        )
        messages = [_to_received(m) for m in out.get("Messages", [])]
        return ReceiveResult(status_code=status, messages=messages)

    async def send(
        self, queue_url: str, body: str, attributes: dict[str, str]
    ) -> SendResult:
        send_kwargs: dict[str, Any] = {"MessageBody": body}
        if attributes:
            send_kwargs["MessageAttributes"] = _to_sqs_attributes(attributes)
        status, out = await self._call("send_message", queue_url, **send_kwargs)
        return SendResult(status_code=status, message_id=out.get("MessageId"))

    async def delete(self, queue_url: str, receipt_handle: str) -> DeleteResult:
        status, _ = await self._call(
            "delete_message", queue_url, ReceiptHandle=receipt_handle
        )
        return DeleteResult(status_code=status)

    async def health_check(self) -> bool:
        """Return True if SQS is reachable."""
        return await self._connection.health_check()
