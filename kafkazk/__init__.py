"""
kafkazk - Kafka cluster coordination over ZooKeeper for batch jobs.

This package lets batch-processing jobs plan and resume work against a
Kafka cluster whose metadata lives in ZooKeeper:
- Broker and topic-partition discovery
- Consumer group offset lookup
- Two-phase (staged, then committed) offset commits
"""

__version__ = "0.1.0"

from kafkazk.broker.metadata import Broker, Partition
from kafkazk.consumer.offset_store import OffsetStore
from kafkazk.zk.resolver import MetadataResolver
from kafkazk.zk.session import ZkSession

__all__ = [
    "Broker",
    "Partition",
    "MetadataResolver",
    "OffsetStore",
    "ZkSession",
]
