"""Live GraphQL subscriptions over websocket.

Follows the newest entity of a collection and yields every value the
indexing service pushes. Speaks the ``graphql-ws`` subprotocol:

- client sends ``connection_init`` then ``start`` with the subscription
- server answers ``connection_ack``, keep-alives (``ka``) and ``data`` frames
- ``error`` / ``connection_error`` are fatal, ``complete`` ends the stream
- a handshake refused with a 4xx status is fatal

Dropped connections are retried with exponential backoff until the stream is
cancelled with stop().
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, AsyncIterator, Callable

import websockets

from ..core.utils import get_logger
from .subgraph import EntityQuery, SubgraphError

logger = get_logger(__name__)

SUBPROTOCOL = "graphql-ws"


class SubgraphSubscription:
    """Cancellable, reconnecting subscription to a subgraph collection.

    Usage:
        subscription = SubgraphSubscription(url, EntityQuery(...))
        async for rows in subscription.stream():
            print(rows)

        # elsewhere
        subscription.stop()
    """

    PING_INTERVAL = 30  # seconds
    RECONNECT_BASE_DELAY = 1  # seconds
    RECONNECT_MAX_DELAY = 60  # seconds
    SUBSCRIPTION_ID = "1"

    def __init__(
        self,
        url: str,
        entity_query: EntityQuery,
        cancel: asyncio.Event | None = None,
        connect: Callable[..., Any] | None = None,
    ):
        """Initialize subscription.

        Args:
            url: Websocket endpoint of the subgraph.
            entity_query: Collection to follow.
            cancel: Event that ends the stream once set.
            connect: Websocket connect factory (defaults to websockets.connect).
        """
        self.url = url
        self.entity_query = entity_query
        self.cancel = cancel or asyncio.Event()
        self._connect = connect or websockets.connect
        self._reconnect_delay = self.RECONNECT_BASE_DELAY

    @property
    def cancelled(self) -> bool:
        """Whether stop() has been requested."""
        return self.cancel.is_set()

    def stop(self) -> None:
        """Request the stream to end."""
        self.cancel.set()

    async def stream(self) -> AsyncIterator[list[dict[str, Any]]]:
        """Yield each pushed result until cancelled.

        Yields:
            Raw entity lists as pushed by the server.

        Raises:
            SubgraphError: If the server rejects the subscription.
        """
        while not self.cancelled:
            try:
                async with self._connect(
                    self.url,
                    subprotocols=[SUBPROTOCOL],
                    ping_interval=self.PING_INTERVAL,
                ) as ws:
                    await self._start(ws)
                    logger.info("subscription_started", entity=self.entity_query.entity)

                    while not self.cancelled:
                        raw = await self._recv_or_cancel(ws)
                        if raw is None:
                            break
                        message = json.loads(raw)
                        msg_type = message.get("type")

                        if msg_type == "connection_ack":
                            self._reconnect_delay = self.RECONNECT_BASE_DELAY
                        elif msg_type == "data":
                            payload = message.get("payload") or {}
                            if payload.get("errors"):
                                raise SubgraphError(f"Subscription error: {payload['errors']}")
                            data = payload.get("data") or {}
                            yield data.get(self.entity_query.entity) or []
                        elif msg_type in ("error", "connection_error"):
                            raise SubgraphError(f"Subscription rejected: {message.get('payload')}")
                        elif msg_type == "complete":
                            logger.info("subscription_completed", entity=self.entity_query.entity)
                            return

            except websockets.InvalidStatus as e:
                status = e.response.status_code
                if 400 <= status < 500:
                    raise SubgraphError(f"Subscription refused: HTTP {status}") from e
                if self.cancelled:
                    break
                logger.warning(
                    "subscription_handshake_failed",
                    status_code=status,
                    retry_in=self._reconnect_delay,
                )
                await self._backoff()
            except (websockets.ConnectionClosed, websockets.InvalidHandshake, OSError) as e:
                if self.cancelled:
                    break
                logger.warning(
                    "subscription_disconnected",
                    error=str(e),
                    retry_in=self._reconnect_delay,
                )
                await self._backoff()

        logger.info("subscription_stopped", entity=self.entity_query.entity)

    async def _start(self, ws: Any) -> None:
        await ws.send(json.dumps({"type": "connection_init", "payload": {}}))
        await ws.send(
            json.dumps(
                {
                    "id": self.SUBSCRIPTION_ID,
                    "type": "start",
                    "payload": {"query": self.entity_query.render_subscription()},
                }
            )
        )

    async def _recv_or_cancel(self, ws: Any) -> str | None:
        """Wait for the next frame, returning None if cancelled first."""
        recv = asyncio.ensure_future(ws.recv())
        cancelled = asyncio.ensure_future(self.cancel.wait())
        done, pending = await asyncio.wait(
            {recv, cancelled}, return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()
        if recv in done:
            return recv.result()
        return None

    async def _backoff(self) -> None:
        """Sleep before reconnecting, waking early on cancellation."""
        try:
            await asyncio.wait_for(self.cancel.wait(), timeout=self._reconnect_delay)
        except asyncio.TimeoutError:
            pass
        self._reconnect_delay = min(self._reconnect_delay * 2, self.RECONNECT_MAX_DELAY)
