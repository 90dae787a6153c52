"""Redis Pub/Sub cluster messenger for horizontal scaling.

Every kinderhub instance subscribes to the same channel. A message published
by one instance reaches all subscribers; each instance ignores the messages
it published itself by comparing the message origin with its instance id.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, cast

import redis.asyncio as redis

from kinderhub.cache.cluster import DEFAULT_SEND_QUEUE_SIZE, Cluster, ClusterMessage
from kinderhub.config import settings

if TYPE_CHECKING:
    from redis.asyncio import Redis
    from redis.asyncio.client import PubSub

logger = logging.getLogger(__name__)

# Module-level connection pool
_redis_client: Redis | None = None


async def get_redis() -> Redis:
    """Get or create the Redis client.

    Uses connection pooling for efficient connection management.
    """
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(  # type: ignore[no-untyped-call]
            settings.redis_url,
            decode_responses=False,
        )
    return _redis_client


async def close_redis() -> None:
    """Close Redis connections."""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


class RedisCluster(Cluster):
    """Cluster messenger over a Redis Pub/Sub channel.

    Example:
        cluster = RedisCluster(instance_id=settings.instance_id)
        cluster.register_handler(ClusterEvent.INVALIDATE_CACHE_FOR_ROLES, on_roles)
        await cluster.start()

        cluster.send(ClusterMessage(ClusterEvent.INVALIDATE_CACHE_FOR_ROLES, "school_admin"))

        # On shutdown
        await cluster.stop()
    """

    def __init__(
        self,
        channel: str | None = None,
        instance_id: str | None = None,
        send_queue_size: int = DEFAULT_SEND_QUEUE_SIZE,
        client: Redis | None = None,
    ):
        super().__init__(instance_id=instance_id, send_queue_size=send_queue_size)
        self.channel = channel or settings.cluster_channel
        self._redis = client
        self._pubsub: PubSub | None = None
        self._listen_task: asyncio.Task[None] | None = None

    async def _get_redis(self) -> Redis:
        if self._redis is None:
            self._redis = await get_redis()
        return self._redis

    async def _start_transport(self) -> None:
        client = await self._get_redis()
        self._pubsub = client.pubsub()
        await self._pubsub.subscribe(self.channel)
        self._listen_task = asyncio.create_task(self._listen_loop())
        logger.info(f"Subscribed to cluster channel {self.channel}")

    async def _stop_transport(self) -> None:
        if self._listen_task:
            self._listen_task.cancel()
            try:
                await self._listen_task
            except asyncio.CancelledError:
                pass
            self._listen_task = None

        if self._pubsub:
            await self._pubsub.unsubscribe(self.channel)
            await self._pubsub.aclose()
            self._pubsub = None

    async def _publish(self, message: ClusterMessage) -> None:
        client = await self._get_redis()
        count = cast(int, await client.publish(self.channel, message.to_bytes()))
        logger.debug(f"Published {message.event.value} {message.data!r} to {count} subscribers")

    async def _listen_loop(self) -> None:
        """Main loop for receiving messages from peers."""
        while self._pubsub:
            try:
                raw = await self._pubsub.get_message(
                    ignore_subscribe_messages=True,
                    timeout=1.0,
                )

                if raw is None:
                    continue

                if raw["type"] == "message":
                    self._handle_message(raw["data"])

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in cluster listener: {e}")
                await asyncio.sleep(1)

    def _handle_message(self, data: bytes) -> None:
        try:
            message = ClusterMessage.from_bytes(data)
        except Exception as e:
            logger.error(f"Failed to parse cluster message: {e}")
            return

        if message.origin == self.instance_id:
            return

        logger.debug(f"Received {message.event.value} {message.data!r} from {message.origin}")
        self.dispatch(message)
