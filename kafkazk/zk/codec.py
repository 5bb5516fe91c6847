"""
Decoding of Kafka metadata stored in ZooKeeper.

Brokers register JSON under ``brokers/ids/{id}``, e.g.::

    {"jmx_port": -1, "timestamp": "1438696380000", "endpoints": ["PLAINTEXT://host:9092"],
     "host": "host", "version": 2, "port": 9092}

Topics store their replica assignment under ``brokers/topics/{topic}``::

    {"version": 1, "partitions": {"0": [1, 2], "1": [2, 3]}}
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set, Tuple


class DecodeError(ValueError):
    """Payload could not be decoded."""
    pass


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_OFFSET_PATTERN = re.compile(r"-?[0-9]+")


def _load_object(data: str) -> Dict[str, Any]:
    try:
        value = json.loads(data)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}") from e
    
    if not isinstance(value, dict):
        raise DecodeError(f"Expected JSON object, got {type(value).__name__}")
    return value


def _optional_str(record: Dict[str, Any], key: str) -> Optional[str]:
    value = record.get(key)
    if value is None:
        return None
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    raise DecodeError(f"Field {key!r} must be a string, got {type(value).__name__}")


def _int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{name} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class BrokerRecord:
    """
    Broker registration record.
    
    Attributes:
        host: Advertised hostname
        port: Advertised port
        jmx_port: JMX port (as registered)
        timestamp: Registration time in epoch milliseconds (as registered)
        endpoints: Listener endpoints
        version: Record format version
    """
    host: str
    port: int
    jmx_port: Optional[str] = None
    timestamp: Optional[str] = None
    endpoints: Tuple[str, ...] = field(default_factory=tuple)
    version: Optional[str] = None
    
    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "BrokerRecord":
        """Create from a decoded JSON object."""
        host = record.get("host")
        if not isinstance(host, str) or not host:
            raise DecodeError(f"Broker host missing or invalid: {host!r}")
        
        endpoints = record.get("endpoints") or []
        if not isinstance(endpoints, list) or not all(isinstance(e, str) for e in endpoints):
            raise DecodeError(f"Broker endpoints must be a list of strings: {endpoints!r}")
        
        return cls(
            host=host,
            port=_int(record.get("port"), "Broker port"),
            jmx_port=_optional_str(record, "jmx_port"),
            timestamp=_optional_str(record, "timestamp"),
            endpoints=tuple(endpoints),
            version=_optional_str(record, "version"),
        )


@dataclass(frozen=True)
class TopicMetadata:
    """
    Replica assignment of a topic.
    
    Attributes:
        version: Record format version
        partitions: Ordered replica broker ids per partition number
    """
    version: Optional[str]
    partitions: Dict[int, Tuple[int, ...]]
    
    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "TopicMetadata":
        """Create from a decoded JSON object."""
        raw_partitions = record.get("partitions")
        if not isinstance(raw_partitions, dict):
            raise DecodeError(f"Topic partitions must be an object: {raw_partitions!r}")
        
        partitions: Dict[int, Tuple[int, ...]] = {}
        for key, broker_ids in raw_partitions.items():
            try:
                partition = int(key)
            except ValueError as e:
                raise DecodeError(f"Invalid partition number {key!r}") from e
            
            if not isinstance(broker_ids, list):
                raise DecodeError(f"Replicas of partition {key} must be a list")
            
            partitions[partition] = tuple(
                _int(broker_id, f"Broker id of partition {key}") for broker_id in broker_ids
            )
        
        return cls(
            version=_optional_str(record, "version"),
            partitions=partitions,
        )
    
    def broker_ids(self) -> Set[int]:
        """All broker ids referenced by any partition."""
        return {broker_id for replicas in self.partitions.values() for broker_id in replicas}


def decode_broker(data: str) -> BrokerRecord:
    """
    Decode a broker registration payload.
    
    Raises:
        DecodeError: If the payload is not a valid broker record
    """
    return BrokerRecord.from_dict(_load_object(data))


def decode_topic(data: str) -> TopicMetadata:
    """
    Decode a topic assignment payload.
    
    Raises:
        DecodeError: If the payload is not a valid topic record
    """
    return TopicMetadata.from_dict(_load_object(data))


def decode_offset(data: str) -> int:
    """
    Decode an offset payload (a signed 64-bit decimal integer).
    
    Raises:
        DecodeError: If the payload is not a decimal int64
    """
    text = data.strip()
    if not _OFFSET_PATTERN.fullmatch(text):
        raise DecodeError(f"Invalid offset {data!r}")
    
    offset = int(text)
    if not INT64_MIN <= offset <= INT64_MAX:
        raise DecodeError(f"Offset {text} out of int64 range")
    return offset


def encode_offset(offset: int) -> str:
    return str(offset)
