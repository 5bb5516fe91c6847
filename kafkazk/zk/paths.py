"""
ZooKeeper path layout for Kafka metadata and consumer offsets.

Layout under the configured root ``R``::

    R/brokers/ids/{broker_id}
    R/brokers/topics/{topic}
    R/brokers/topics/{topic}/{broker_id}
    R/consumers/{group}/offsets/{topic}/{partition_key}
    R/consumers/{group}/offsets-temp/{topic}/{partition_key}
"""


class ZkPaths:
    """Builds node paths under a ZooKeeper root."""
    
    def __init__(self, root: str):
        """
        Args:
            root: ZooKeeper root of the Kafka configuration. One trailing
                separator is stripped.
        """
        self.root = root[:-1] if root.endswith("/") else root
    
    def with_root(self, relative: str) -> str:
        return f"{self.root}/{relative}"
    
    def broker_ids(self) -> str:
        return f"{self.root}/brokers/ids"
    
    def broker(self, broker_id: int) -> str:
        return f"{self.broker_ids()}/{broker_id}"
    
    def topic(self, topic: str) -> str:
        return f"{self.root}/brokers/topics/{topic}"
    
    def topic_broker(self, topic: str, broker_id: int) -> str:
        """Node holding the number of partitions of topic on a broker."""
        return f"{self.topic(topic)}/{broker_id}"
    
    def offset(self, group: str, topic: str, partition_key: str) -> str:
        return f"{self.root}/consumers/{group}/offsets/{topic}/{partition_key}"
    
    def temp_offsets(self, group: str, topic: str) -> str:
        return f"{self.root}/consumers/{group}/offsets-temp/{topic}"
    
    def temp_offset(self, group: str, topic: str, partition_key: str) -> str:
        return f"{self.temp_offsets(group, topic)}/{partition_key}"
    
    def __repr__(self) -> str:
        return f"ZkPaths(root={self.root!r})"
