"""In-process caches with cluster-wide invalidation.

- provider: named TTL caches (``cachetools``)
- cluster: the cluster messenger interface and its in-process transport
- redis_cluster: Redis Pub/Sub transport
- layer / stores: the local-cache store layer and its read-through decorators
"""

from kinderhub.cache.cluster import (
    Cluster,
    ClusterEvent,
    ClusterMessage,
    InMemoryCluster,
    InMemoryNetwork,
    SendType,
)
from kinderhub.cache.layer import LocalCacheLayer
from kinderhub.cache.provider import CacheProvider, NamedCache

__all__ = [
    "CacheProvider",
    "Cluster",
    "ClusterEvent",
    "ClusterMessage",
    "InMemoryCluster",
    "InMemoryNetwork",
    "LocalCacheLayer",
    "NamedCache",
    "SendType",
]
