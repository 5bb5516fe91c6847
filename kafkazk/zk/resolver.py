"""
Kafka cluster metadata resolution.

Resolves brokers and topic partitions from the metadata Kafka keeps in
ZooKeeper. Resolution is fail-soft: missing or malformed metadata degrades
the result instead of aborting a planning pass.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from kafkazk.broker.metadata import Broker, Partition
from kafkazk.utils.logging import get_logger
from kafkazk.zk.client import CoordinationClient, CoordinationError
from kafkazk.zk.codec import DecodeError, decode_broker, decode_topic
from kafkazk.zk.paths import ZkPaths
from kafkazk.zk.result import Failure, FailureReason, Result

logger = get_logger(__name__)

BrokerCache = Dict[int, Optional[Broker]]


@dataclass(frozen=True)
class PartitionResolution:
    """
    Outcome of resolving a topic's partitions.
    
    Attributes:
        topic: Topic name
        partitions: Partitions resolved, ordered by partition number
        brokers: Broker lookups made so far (None for unresolvable ids)
        failure: What stopped resolution early, if anything
    """
    topic: str
    partitions: List[Partition] = field(default_factory=list)
    brokers: BrokerCache = field(default_factory=dict)
    failure: Optional[Failure] = None
    
    @property
    def complete(self) -> bool:
        return self.failure is None


def _log_failure(event: str, failure: Failure, **context) -> None:
    if failure.reason == FailureReason.UNAVAILABLE:
        logger.error(event, reason=failure.reason.value, error=failure.message, **context)
    else:
        logger.warning(event, reason=failure.reason.value, error=failure.message, **context)


class MetadataResolver:
    """
    Resolves brokers and topic partitions.
    
    Lookups come in two forms: ``fetch_*``/``resolve_*`` return explicit
    results carrying the failure reason, while ``get_*`` log failures and
    return what could be resolved.
    """
    
    def __init__(self, client: CoordinationClient, paths: ZkPaths):
        """
        Initialize resolver.
        
        Args:
            client: Coordination client
            paths: ZooKeeper path layout
        """
        self._client = client
        self._paths = paths
    
    def fetch_broker(self, broker_id: int) -> Result[Broker]:
        """
        Look up a broker by id.
        
        Args:
            broker_id: Broker ID
        
        Returns:
            The broker, or an absent/malformed/unavailable failure
        """
        path = self._paths.broker(broker_id)
        
        try:
            data = self._client.read_data(path, tolerate_missing=True)
        except CoordinationError as e:
            return Result.fail(FailureReason.UNAVAILABLE, str(e), path)
        except DecodeError as e:
            return Result.fail(FailureReason.MALFORMED, str(e), path)
        
        if not data:
            return Result.fail(FailureReason.ABSENT, f"Broker {broker_id} not registered", path)
        
        logger.debug("Read broker registration", broker_id=broker_id, data=data)
        
        try:
            record = decode_broker(data)
        except DecodeError as e:
            return Result.fail(FailureReason.MALFORMED, str(e), path)
        
        return Result.of(Broker(broker_id=broker_id, host=record.host, port=record.port))
    
    def get_broker(self, broker_id: int) -> Optional[Broker]:
        """
        Get a broker by id.
        
        Args:
            broker_id: Broker ID
        
        Returns:
            The broker, or None if it is missing or could not be read
        """
        result = self.fetch_broker(broker_id)
        if result.failure is not None:
            _log_failure("Broker lookup failed", result.failure, broker_id=broker_id)
        return result.value
    
    def get_brokers(self) -> List[Broker]:
        """
        Get all resolvable brokers in the cluster.
        
        Returns:
            Brokers ordered by id; empty if none are registered
        """
        registry = self._paths.broker_ids()
        
        try:
            children = self._client.get_children_if_exists(registry)
        except CoordinationError as e:
            logger.error("Failed to list brokers", path=registry, error=str(e))
            return []
        
        broker_ids = []
        for child in children:
            try:
                broker_ids.append(int(child))
            except ValueError:
                logger.warning("Ignoring non-numeric broker node", path=registry, node=child)
        
        brokers = []
        for broker_id in sorted(broker_ids):
            broker = self.get_broker(broker_id)
            if broker is not None:
                brokers.append(broker)
        
        return brokers
    
    def resolve_partitions(
        self,
        topic: str,
        brokers: Optional[Mapping[int, Optional[Broker]]] = None,
    ) -> PartitionResolution:
        """
        Resolve the partitions of a topic and the brokers hosting them.
        
        Each referenced broker id is looked up at most once: lookups are
        recorded in a cache that starts as a copy of ``brokers`` and is
        returned with the result. Unregistered or malformed brokers are
        cached as None. Resolution stops at the first topic read or decode
        failure, or when the coordination service becomes unavailable, and
        returns the partitions resolved up to that point.
        
        Args:
            topic: Topic name
            brokers: Broker lookups from a previous resolution to reuse
        
        Returns:
            Partition resolution
        """
        cache: BrokerCache = dict(brokers or {})
        partitions: List[Partition] = []
        path = self._paths.topic(topic)
        
        def stop(reason: FailureReason, message: str, failed_path: str) -> PartitionResolution:
            return PartitionResolution(
                topic=topic,
                partitions=partitions,
                brokers=cache,
                failure=Failure(reason=reason, message=message, path=failed_path),
            )
        
        try:
            data = self._client.read_data(path, tolerate_missing=True)
        except CoordinationError as e:
            return stop(FailureReason.UNAVAILABLE, str(e), path)
        except DecodeError as e:
            return stop(FailureReason.MALFORMED, str(e), path)
        
        if not data:
            return stop(FailureReason.ABSENT, f"Topic {topic} does not exist", path)
        
        try:
            metadata = decode_topic(data)
        except DecodeError as e:
            return stop(FailureReason.MALFORMED, str(e), path)
        
        for partition_id in sorted(metadata.partitions):
            leader: Optional[Broker] = None
            
            for broker_id in metadata.partitions[partition_id]:
                if broker_id not in cache:
                    result = self.fetch_broker(broker_id)
                    failure = result.failure
                    
                    if failure is not None and failure.reason == FailureReason.UNAVAILABLE:
                        return stop(failure.reason, failure.message, failure.path)
                    if failure is not None:
                        _log_failure(
                            "Broker lookup failed",
                            failure,
                            broker_id=broker_id,
                            topic=topic,
                        )
                    
                    cache[broker_id] = result.value
                
                if leader is None:
                    leader = cache[broker_id]
            
            partitions.append(Partition(topic=topic, partition=partition_id, broker=leader))
        
        logger.debug(
            "Resolved topic partitions",
            topic=topic,
            partitions=len(partitions),
            brokers=len(cache),
        )
        
        return PartitionResolution(topic=topic, partitions=partitions, brokers=cache)
    
    def get_partitions(self, topic: str) -> List[Partition]:
        """
        Get all partitions of a topic.
        
        A short list may be partial: failures are logged, not raised.
        
        Args:
            topic: Topic name
        
        Returns:
            Partitions ordered by partition number
        """
        resolution = self.resolve_partitions(topic)
        
        if resolution.failure is not None:
            _log_failure(
                "Partition resolution incomplete",
                resolution.failure,
                topic=topic,
                resolved=len(resolution.partitions),
            )
        
        return resolution.partitions
    
    def partition_exists(self, broker: Broker, topic: str, partition_id: int) -> bool:
        """
        Check whether a partition exists on a broker.
        
        Args:
            broker: Broker
            topic: Topic name
            partition_id: Partition number
        
        Returns:
            True if the broker holds at least partition_id + 1 partitions of topic
        """
        path = self._paths.topic_broker(topic, broker.broker_id)
        
        try:
            data = self._client.read_data(path, tolerate_missing=True)
        except CoordinationError as e:
            logger.error("Failed to read partition count", path=path, error=str(e))
            return False
        except DecodeError as e:
            logger.warning("Malformed partition count", path=path, error=str(e))
            return False
        
        if not data:
            return False
        
        try:
            count = int(data.strip())
        except ValueError:
            logger.warning("Malformed partition count", path=path, data=data)
            return False
        
        return 0 <= partition_id < count
