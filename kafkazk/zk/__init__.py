"""
ZooKeeper coordination layer.

Path layout, client adapters, metadata decoding and resolution.
"""

from kafkazk.zk.client import (
    CoordinationClient,
    CoordinationError,
    KazooCoordinationClient,
    NodeExistsError,
    NoNodeError,
)
from kafkazk.zk.memory import InMemoryCoordinationClient
from kafkazk.zk.paths import ZkPaths
from kafkazk.zk.resolver import MetadataResolver, PartitionResolution

__all__ = [
    "CoordinationClient",
    "CoordinationError",
    "InMemoryCoordinationClient",
    "KazooCoordinationClient",
    "MetadataResolver",
    "NodeExistsError",
    "NoNodeError",
    "PartitionResolution",
    "ZkPaths",
]
