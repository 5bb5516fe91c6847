"""
Broker and partition records.

Resolved cluster topology as handed to batch jobs for planning.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Broker:
    """
    A Kafka broker.
    
    Attributes:
        broker_id: Unique broker identifier
        host: Broker hostname/IP
        port: Broker port
    """
    broker_id: int
    host: str
    port: int
    
    def endpoint(self) -> str:
        """
        Get broker endpoint.
        
        Returns:
            Endpoint string (host:port)
        """
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class Partition:
    """
    A topic partition, optionally located on a broker.
    
    Attributes:
        topic: Topic name
        partition: Partition number
        broker: Broker hosting the partition, None when unknown
    """
    topic: str
    partition: int
    broker: Optional[Broker] = None
    
    @property
    def partition_key(self) -> str:
        """Key of this partition under consumer offset paths."""
        return str(self.partition)
    
    @classmethod
    def from_key(cls, topic: str, key: str) -> "Partition":
        """
        Rebuild a broker-less partition from its offset path key.
        
        Raises:
            ValueError: If key is not a partition number
        """
        return cls(topic=topic, partition=int(key))
    
    def __str__(self) -> str:
        return f"{self.topic}-{self.partition}"
