"""
Consumer group offsets stored in ZooKeeper.

Offsets live under ``consumers/{group}/offsets/{topic}/{partition}``. A job
may instead stage an offset under ``consumers/{group}/offsets-temp/...`` and
later commit every staged offset of the topic at once, so that offsets only
move once all partitions have been processed.

Commits are at-least-once and idempotent per partition, not atomic across
partitions: a failed commit leaves the remaining partitions staged, and
calling commit_group again finishes them.
"""

from typing import List

from kafkazk.broker.metadata import Partition
from kafkazk.utils.logging import get_logger
from kafkazk.zk.client import (
    CoordinationClient,
    CoordinationError,
    NodeExistsError,
    NoNodeError,
)
from kafkazk.zk.codec import DecodeError, decode_offset, encode_offset
from kafkazk.zk.paths import ZkPaths
from kafkazk.zk.result import FailureReason, Result

logger = get_logger(__name__)

# Offset reported for a partition the group has never committed
NO_COMMIT = -1


class OffsetStore:
    """
    Reads, stages and commits consumer group offsets.
    
    State per (group, topic, partition)::
    
        no commit -> staged -> committed -> staged -> committed ...
    """
    
    def __init__(self, client: CoordinationClient, paths: ZkPaths):
        """
        Initialize offset store.
        
        Args:
            client: Coordination client
            paths: ZooKeeper path layout
        """
        self._client = client
        self._paths = paths
    
    def fetch_last_commit(self, group: str, partition: Partition) -> Result[int]:
        """
        Look up the last offset committed by a group.
        
        An empty node counts as absent.
        
        Args:
            group: Consumer group
            partition: Topic partition
        
        Returns:
            The offset, or an absent/malformed/unavailable failure
        """
        path = self._paths.offset(group, partition.topic, partition.partition_key)
        
        try:
            data = self._client.read_data(path, tolerate_missing=True)
        except CoordinationError as e:
            return Result.fail(FailureReason.UNAVAILABLE, str(e), path)
        except DecodeError as e:
            return Result.fail(FailureReason.MALFORMED, str(e), path)
        
        if data is None or not data.strip():
            return Result.fail(FailureReason.ABSENT, "No committed offset", path)
        
        try:
            return Result.of(decode_offset(data))
        except DecodeError as e:
            return Result.fail(FailureReason.MALFORMED, str(e), path)
    
    def get_last_commit(self, group: str, partition: Partition) -> int:
        """
        Get the last offset committed by a group.
        
        Args:
            group: Consumer group
            partition: Topic partition
        
        Returns:
            The offset, or NO_COMMIT (-1) if the group never committed one
        """
        result = self.fetch_last_commit(group, partition)
        failure = result.failure
        
        if failure is None:
            logger.debug(
                "Last committed offset",
                group=group,
                partition=str(partition),
                offset=result.value,
            )
        elif failure.reason == FailureReason.UNAVAILABLE:
            logger.error(
                "Failed to read committed offset",
                group=group,
                partition=str(partition),
                error=failure.message,
            )
        elif failure.reason == FailureReason.MALFORMED:
            logger.warning(
                "Ignoring malformed committed offset",
                group=group,
                partition=str(partition),
                error=failure.message,
            )
        
        return result.value_or(NO_COMMIT)
    
    def stage_offset(
        self,
        group: str,
        partition: Partition,
        offset: int,
        temporary: bool = False,
    ) -> bool:
        """
        Set the offset of a group on a partition.
        
        With ``temporary=True`` the offset is only staged and becomes the
        committed offset on the next commit_group for the topic.
        
        Args:
            group: Consumer group
            partition: Topic partition
            offset: Offset to record
            temporary: Stage instead of committing directly
        
        Returns:
            True if the offset was written, False if the write failed
        """
        if temporary:
            path = self._paths.temp_offset(group, partition.topic, partition.partition_key)
        else:
            path = self._paths.offset(group, partition.topic, partition.partition_key)
        
        try:
            self._write_offset(path, offset)
        except CoordinationError as e:
            logger.error(
                "Failed to set offset",
                group=group,
                partition=str(partition),
                offset=offset,
                temporary=temporary,
                error=str(e),
            )
            return False
        
        logger.debug(
            "Set offset",
            group=group,
            partition=str(partition),
            offset=offset,
            temporary=temporary,
            path=path,
        )
        return True
    
    def _write_offset(self, path: str, offset: int) -> None:
        if not self._client.exists(path):
            try:
                self._client.create_persistent(path, create_parents=True)
            except NodeExistsError:
                pass  # created by a concurrent worker
        self._client.write_data(path, encode_offset(offset))
    
    def staged_partitions(self, group: str, topic: str) -> List[Partition]:
        """
        Get the partitions of a topic with a staged offset.
        
        Args:
            group: Consumer group
            topic: Topic name
        
        Returns:
            Broker-less partitions ordered by partition number
        
        Raises:
            CoordinationError: If the staged offsets could not be listed
        """
        container = self._paths.temp_offsets(group, topic)
        partitions = []
        
        for key in self._client.get_children_if_exists(container):
            try:
                partitions.append(Partition.from_key(topic, key))
            except ValueError:
                logger.warning("Ignoring non-numeric staged offset node", path=container, node=key)
        
        return sorted(partitions, key=lambda p: p.partition)
    
    def commit_group(self, group: str, topic: str) -> bool:
        """
        Commit every staged offset of a group on a topic.
        
        Each staged offset is written as the committed offset and its staged
        node deleted, one partition at a time. Empty staged nodes are
        dropped. Malformed ones are left in place.
        
        Args:
            group: Consumer group
            topic: Topic name
        
        Returns:
            True if every staged offset was committed (including when none
            were staged), False if any remain staged
        """
        container = self._paths.temp_offsets(group, topic)
        
        try:
            keys = self._client.get_children_if_exists(container)
        except CoordinationError as e:
            logger.error("Failed to list staged offsets", group=group, topic=topic, error=str(e))
            return False
        
        committed = 0
        success = True
        
        for key in keys:
            temp_path = self._paths.temp_offset(group, topic, key)
            
            try:
                data = self._client.read_data(temp_path, tolerate_missing=True)
                if data is None:
                    continue  # committed by a concurrent worker
                
                if not data.strip():
                    logger.warning("Dropping empty staged offset", path=temp_path)
                    self._delete_if_exists(temp_path)
                    continue
                
                offset = decode_offset(data)
                self._write_offset(self._paths.offset(group, topic, key), offset)
                self._delete_if_exists(temp_path)
                committed += 1
            
            except DecodeError as e:
                logger.warning("Malformed staged offset", path=temp_path, error=str(e))
                success = False
            
            except CoordinationError as e:
                logger.error(
                    "Commit interrupted",
                    group=group,
                    topic=topic,
                    partition=key,
                    committed=committed,
                    error=str(e),
                )
                return False
        
        logger.info(
            "Committed staged offsets",
            group=group,
            topic=topic,
            partitions=committed,
        )
        
        return success
    
    def _delete_if_exists(self, path: str) -> None:
        try:
            self._client.delete(path)
        except NoNodeError:
            pass
