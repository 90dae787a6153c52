"""Cluster messaging for cache invalidation.

Nodes of a kinderhub deployment tell each other which cache entries became
stale by broadcasting ``ClusterMessage``s. Delivery is best effort: sending
never blocks and never raises, messages that cannot be queued or published
are dropped and counted. Each node registers exactly one handler per
``ClusterEvent``; a message is dispatched to that handler on every node
except the one that sent it.

Implementations:
- InMemoryCluster: nodes attached to a shared ``InMemoryNetwork``, for
  single-instance deployments and tests
- RedisCluster: Redis Pub/Sub, for multi-instance deployments
  (see ``kinderhub.cache.redis_cluster``)
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from uuid import uuid4

import orjson

from kinderhub.observability.metrics import (
    record_cluster_message_dropped,
    record_cluster_message_received,
    record_cluster_message_sent,
)

logger = logging.getLogger(__name__)

DEFAULT_SEND_QUEUE_SIZE = 1000


class ClusterEvent(str, Enum):
    """Events exchanged between nodes."""

    INVALIDATE_CACHE_FOR_REACTIONS = "inv_reactions"
    INVALIDATE_CACHE_FOR_ROLES = "inv_roles"
    INVALIDATE_CACHE_FOR_SCHEMES = "inv_schemes"
    INVALIDATE_CACHE_FOR_EMOJIS_BY_ID = "inv_emojis_by_id"
    INVALIDATE_CACHE_FOR_EMOJIS_ID_BY_NAME = "inv_emojis_id_by_name"
    INVALIDATE_CACHE_FOR_PROFILE_BY_IDS = "inv_profile_by_ids"
    INVALIDATE_ALL_CACHES = "inv_all_caches"
    INVALIDATE_CACHE_FOR_USER = "inv_user"


class SendType(str, Enum):
    BEST_EFFORT = "best_effort"
    RELIABLE = "reliable"


@dataclass(frozen=True)
class ClusterMessage:
    """A message broadcast to the other nodes.

    ``data`` is the cache key to remove; the empty string means the whole
    cache. ``origin`` is the instance id of the sending node.
    """

    event: ClusterEvent
    data: str = ""
    send_type: SendType = SendType.BEST_EFFORT
    origin: str | None = None

    def to_bytes(self) -> bytes:
        """Serialize to JSON bytes."""
        return orjson.dumps(
            {
                "event": self.event.value,
                "data": self.data,
                "send_type": self.send_type.value,
                "origin": self.origin,
            }
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "ClusterMessage":
        """Deserialize from JSON bytes."""
        parsed = orjson.loads(data)
        return cls(
            event=ClusterEvent(parsed["event"]),
            data=parsed.get("data") or "",
            send_type=SendType(parsed.get("send_type", SendType.BEST_EFFORT.value)),
            origin=parsed.get("origin"),
        )


# Handler type for received messages
ClusterHandler = Callable[[ClusterMessage], None]


class Cluster(ABC):
    """Abstract cluster messenger.

    ``send()`` only enqueues the message; a background task started by
    ``start()`` hands queued messages to the transport.
    """

    def __init__(
        self,
        instance_id: str | None = None,
        send_queue_size: int = DEFAULT_SEND_QUEUE_SIZE,
    ):
        self.instance_id = instance_id or uuid4().hex[:8]
        self._handlers: dict[ClusterEvent, ClusterHandler] = {}
        self._queue: asyncio.Queue[ClusterMessage] = asyncio.Queue(maxsize=send_queue_size)
        self._running = False
        self._task: asyncio.Task[None] | None = None

    def register_handler(self, event: ClusterEvent, handler: ClusterHandler) -> None:
        """Register the handler for ``event``, replacing any previous one."""
        if event in self._handlers:
            logger.warning(f"Replacing cluster handler for {event.value}")
        self._handlers[event] = handler
        handler_name = getattr(handler, "__name__", handler.__class__.__name__)
        logger.debug(f"Registered cluster handler {handler_name} for {event.value}")

    def send(self, message: ClusterMessage) -> None:
        """Queue ``message`` for broadcast.

        Drops the message when the send queue is full.
        """
        if message.origin is None:
            message = replace(message, origin=self.instance_id)
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning(f"Cluster send queue full, dropping {message.event.value}")
            record_cluster_message_dropped(message.event.value, "queue_full")

    async def start(self) -> None:
        """Start the transport and the sender task."""
        if self._running:
            return

        await self._start_transport()
        self._running = True
        self._task = asyncio.create_task(self._send_loop())
        logger.info(f"Started cluster {self.__class__.__name__} as {self.instance_id}")

    async def stop(self) -> None:
        """Stop the sender task and the transport."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        await self._stop_transport()
        logger.info(f"Stopped cluster {self.__class__.__name__} {self.instance_id}")

    async def _send_loop(self) -> None:
        """Publish queued messages until stopped."""
        while self._running:
            try:
                message = await asyncio.wait_for(self._queue.get(), timeout=1.0)
            except TimeoutError:
                continue
            except asyncio.CancelledError:
                break

            try:
                await self._publish(message)
                record_cluster_message_sent(message.event.value)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Failed to publish cluster message {message.event.value}: {e}")
                record_cluster_message_dropped(message.event.value, "publish_error")
            finally:
                self._queue.task_done()

    def dispatch(self, message: ClusterMessage) -> None:
        """Run the handler registered for a message received from a peer."""
        record_cluster_message_received(message.event.value)
        handler = self._handlers.get(message.event)
        if handler is None:
            logger.debug(f"No cluster handler for {message.event.value}")
            return
        try:
            handler(message)
        except Exception:
            logger.exception(f"Error in cluster handler for {message.event.value}")

    @property
    def pending_count(self) -> int:
        """Number of messages waiting to be published."""
        return self._queue.qsize()

    async def drain(self) -> None:
        """Wait for all queued messages to be published."""
        await self._queue.join()

    @abstractmethod
    async def _publish(self, message: ClusterMessage) -> None:
        """Hand one message to the transport."""
        pass

    async def _start_transport(self) -> None:
        pass

    async def _stop_transport(self) -> None:
        pass


class InMemoryNetwork:
    """Connects InMemoryCluster nodes living in the same process."""

    def __init__(self) -> None:
        self._nodes: list[InMemoryCluster] = []

    def attach(self, node: InMemoryCluster) -> None:
        if node not in self._nodes:
            self._nodes.append(node)

    def detach(self, node: InMemoryCluster) -> None:
        if node in self._nodes:
            self._nodes.remove(node)

    def deliver(self, message: ClusterMessage) -> None:
        for node in list(self._nodes):
            if node.instance_id != message.origin:
                node.dispatch(message)


class InMemoryCluster(Cluster):
    """Cluster node delivering messages to the other nodes of its network.

    A node without a network is a single-node deployment: messages are
    published to nobody.
    """

    def __init__(
        self,
        network: InMemoryNetwork | None = None,
        instance_id: str | None = None,
        send_queue_size: int = DEFAULT_SEND_QUEUE_SIZE,
    ):
        super().__init__(instance_id=instance_id, send_queue_size=send_queue_size)
        self.network = network or InMemoryNetwork()
        self.network.attach(self)

    async def _publish(self, message: ClusterMessage) -> None:
        self.network.deliver(message)

    async def _start_transport(self) -> None:
        self.network.attach(self)

    async def _stop_transport(self) -> None:
        self.network.detach(self)
