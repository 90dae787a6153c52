"""Tests for cluster messaging."""

from __future__ import annotations

import asyncio

import pytest

from kinderhub.cache.cluster import (
    ClusterEvent,
    ClusterMessage,
    InMemoryCluster,
    InMemoryNetwork,
    SendType,
)
from kinderhub.cache.redis_cluster import RedisCluster


async def wait_for(predicate, timeout: float = 2.0) -> None:
    """Poll until ``predicate()`` is true."""
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


class FakeRedis:
    """Records publish calls."""

    def __init__(self, fail: bool = False):
        self.published: list[tuple[str, bytes]] = []
        self.fail = fail

    async def publish(self, channel: str, data: bytes) -> int:
        if self.fail:
            raise ConnectionError("redis down")
        self.published.append((channel, data))
        return 1


class TestClusterMessage:
    """Tests for ClusterMessage serialization."""

    def test_bytes_round_trip(self) -> None:
        message = ClusterMessage(
            ClusterEvent.INVALIDATE_CACHE_FOR_ROLES, "school_admin", origin="node-a"
        )
        parsed = ClusterMessage.from_bytes(message.to_bytes())
        assert parsed == message

    def test_defaults(self) -> None:
        parsed = ClusterMessage.from_bytes(b'{"event": "inv_all_caches"}')
        assert parsed.event == ClusterEvent.INVALIDATE_ALL_CACHES
        assert parsed.data == ""
        assert parsed.send_type == SendType.BEST_EFFORT
        assert parsed.origin is None

    def test_unknown_event_rejected(self) -> None:
        with pytest.raises(ValueError):
            ClusterMessage.from_bytes(b'{"event": "nope"}')


class TestInMemoryCluster:
    """Tests for nodes sharing an InMemoryNetwork."""

    @pytest.fixture
    async def nodes(self):
        network = InMemoryNetwork()
        first = InMemoryCluster(network, instance_id="node-a")
        second = InMemoryCluster(network, instance_id="node-b")
        await first.start()
        await second.start()
        yield first, second
        await first.stop()
        await second.stop()

    async def test_peer_receives_message(self, nodes) -> None:
        first, second = nodes
        received: list[ClusterMessage] = []
        second.register_handler(ClusterEvent.INVALIDATE_CACHE_FOR_ROLES, received.append)

        first.send(ClusterMessage(ClusterEvent.INVALIDATE_CACHE_FOR_ROLES, "teacher"))
        await wait_for(lambda: len(received) == 1)

        assert received[0].data == "teacher"
        assert received[0].origin == "node-a"

    async def test_sender_does_not_receive_own_message(self, nodes) -> None:
        first, _ = nodes
        received: list[ClusterMessage] = []
        first.register_handler(ClusterEvent.INVALIDATE_ALL_CACHES, received.append)

        first.send(ClusterMessage(ClusterEvent.INVALIDATE_ALL_CACHES))
        await first.drain()

        assert received == []

    async def test_handler_error_is_contained(self, nodes) -> None:
        first, second = nodes
        received: list[ClusterMessage] = []

        def broken(message: ClusterMessage) -> None:
            raise RuntimeError("boom")

        second.register_handler(ClusterEvent.INVALIDATE_CACHE_FOR_SCHEMES, broken)
        second.register_handler(ClusterEvent.INVALIDATE_CACHE_FOR_ROLES, received.append)

        first.send(ClusterMessage(ClusterEvent.INVALIDATE_CACHE_FOR_SCHEMES, "s1"))
        first.send(ClusterMessage(ClusterEvent.INVALIDATE_CACHE_FOR_ROLES, "r1"))
        await wait_for(lambda: len(received) == 1)

        assert received[0].data == "r1"

    async def test_register_handler_replaces_previous(self, nodes) -> None:
        first, second = nodes
        old: list[ClusterMessage] = []
        new: list[ClusterMessage] = []
        second.register_handler(ClusterEvent.INVALIDATE_CACHE_FOR_USER, old.append)
        second.register_handler(ClusterEvent.INVALIDATE_CACHE_FOR_USER, new.append)

        first.send(ClusterMessage(ClusterEvent.INVALIDATE_CACHE_FOR_USER, "u1"))
        await wait_for(lambda: len(new) == 1)

        assert old == []

    async def test_stopped_node_is_detached(self, nodes) -> None:
        first, second = nodes
        received: list[ClusterMessage] = []
        second.register_handler(ClusterEvent.INVALIDATE_ALL_CACHES, received.append)
        await second.stop()

        first.send(ClusterMessage(ClusterEvent.INVALIDATE_ALL_CACHES))
        await first.drain()

        assert received == []

    async def test_full_queue_drops_message(self) -> None:
        node = InMemoryCluster(instance_id="solo", send_queue_size=1)

        node.send(ClusterMessage(ClusterEvent.INVALIDATE_ALL_CACHES))
        node.send(ClusterMessage(ClusterEvent.INVALIDATE_ALL_CACHES))

        assert node.pending_count == 1

    async def test_send_sets_origin(self) -> None:
        node = InMemoryCluster(instance_id="solo")
        node.send(ClusterMessage(ClusterEvent.INVALIDATE_ALL_CACHES))
        queued = node._queue.get_nowait()
        assert queued.origin == "solo"


class TestRedisCluster:
    """Tests for the Redis transport without a live server."""

    async def test_publish_to_channel(self) -> None:
        client = FakeRedis()
        cluster = RedisCluster(channel="kh-test", instance_id="node-a", client=client)
        message = ClusterMessage(
            ClusterEvent.INVALIDATE_CACHE_FOR_EMOJIS_BY_ID, "e1", origin="node-a"
        )

        await cluster._publish(message)

        assert client.published == [("kh-test", message.to_bytes())]

    async def test_publish_error_keeps_sender_alive(self) -> None:
        client = FakeRedis(fail=True)
        cluster = RedisCluster(channel="kh-test", instance_id="node-a", client=client)
        cluster._running = True
        task = asyncio.create_task(cluster._send_loop())
        try:
            cluster.send(ClusterMessage(ClusterEvent.INVALIDATE_ALL_CACHES))
            await asyncio.wait_for(cluster.drain(), timeout=2.0)

            client.fail = False
            cluster.send(ClusterMessage(ClusterEvent.INVALIDATE_CACHE_FOR_ROLES, "r"))
            await asyncio.wait_for(cluster.drain(), timeout=2.0)
        finally:
            cluster._running = False
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        assert len(client.published) == 1

    def test_own_messages_ignored(self) -> None:
        cluster = RedisCluster(instance_id="node-a", client=FakeRedis())
        received: list[ClusterMessage] = []
        cluster.register_handler(ClusterEvent.INVALIDATE_CACHE_FOR_ROLES, received.append)

        own = ClusterMessage(ClusterEvent.INVALIDATE_CACHE_FOR_ROLES, "x", origin="node-a")
        peer = ClusterMessage(ClusterEvent.INVALIDATE_CACHE_FOR_ROLES, "y", origin="node-b")
        cluster._handle_message(own.to_bytes())
        cluster._handle_message(peer.to_bytes())

        assert [m.data for m in received] == ["y"]

    def test_malformed_message_ignored(self) -> None:
        cluster = RedisCluster(instance_id="node-a", client=FakeRedis())
        received: list[ClusterMessage] = []
        cluster.register_handler(ClusterEvent.INVALIDATE_ALL_CACHES, received.append)

        cluster._handle_message(b"not json")

        assert received == []
