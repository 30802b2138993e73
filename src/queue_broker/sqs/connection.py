"""Lazily opened aiobotocore SQS client shared by SQSTransport."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from aiobotocore.session import AioSession

from ..exceptions import TransportConnectionError

logger = logging.getLogger(__name__)


class SQSConnectionManager:
    """Owns one SQS client for the lifetime of a broker.

    The client is opened on first use and reused by every receive, send and
    delete. Opening failures surface as ``TransportConnectionError`` with
    operation ``"connect"`` so a fetch cycle aborts with the package's own
    error type.

    Usage::

        async with SQSConnectionManager("eu-west-1") as connection:
            broker = QueueBroker(SQSTransport(connection))
            await broker.fetch()
    """

    def __init__(
        self,
        region_name: str = "us-east-1",
        *,
        session: AioSession | None = None,
        probe_queue_url: str | None = None,
        **client_kwargs: Any,
    ) -> None:
        """Configure where and how the client connects.

        Args:
            region_name: AWS region of the queues.
            session: aiobotocore session; a new one is created if omitted.
            probe_queue_url: Queue checked by ``health_check``. When unset,
                the check lists at most one queue instead.
            **client_kwargs: Extra ``create_client`` arguments such as
                ``endpoint_url`` or credentials.
        """
        self._region = region_name
        self._session = session or AioSession()
        self._probe_queue_url = probe_queue_url
        self._client_kwargs = client_kwargs
        self._client: Any = None
        self._exit_stack: Any = None
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def get_client(self) -> Any:
        """Return the shared client, opening it on first call."""
        if self._client is not None:
            return self._client
        async with self._lock:
            if self._client is None:
                await self._open()
        return self._client

    async def _open(self) -> None:
        logger.debug("Opening SQS client for region %s", self._region)
        try:
            context = self._session.create_client(
                "sqs", region_name=self._region, **self._client_kwargs
            )
            client = await context.__aenter__()
        except Exception as e:
            logger.error("Unable to open SQS client for region %s: %s", self._region, e)
            raise TransportConnectionError(
                f"Unable to open SQS client for region {self._region}: {e}",
                operation="connect",
            ) from e
        self._exit_stack = context
        self._client = client

    async def close(self) -> None:
        """Close the client. Safe to call when it was never opened."""
        context = self._exit_stack
        if context is None:
            return
        self._exit_stack = None
        self._client = None
        logger.debug("Closing SQS client for region %s", self._region)
        await context.__aexit__(None, None, None)

    async def health_check(self) -> bool:
        try:
            client = await self.get_client()
            if self._probe_queue_url:
                await client.get_queue_attributes(
                    QueueUrl=self._probe_queue_url, AttributeNames=["QueueArn"]
                )
            else:
                await client.list_queues(MaxResults=1)
        except Exception as e:  # noqa: BLE001
            logger.warning("SQS health check failed: %s", e)
            return False
        return True

    async def __aenter__(self) -> SQSConnectionManager:
        await self.get_client()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
