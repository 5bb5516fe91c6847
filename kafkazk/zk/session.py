"""
ZooKeeper session for batch jobs.

Bundles one coordination client with the metadata resolver and offset
store that share it.
"""

from typing import Optional

from kafkazk.consumer.offset_store import OffsetStore
from kafkazk.utils.config import Config
from kafkazk.utils.logging import configure_from_config, get_logger
from kafkazk.zk.client import CoordinationClient, KazooCoordinationClient
from kafkazk.zk.paths import ZkPaths
from kafkazk.zk.resolver import MetadataResolver

logger = get_logger(__name__)


class ZkSession:
    """
    Kafka metadata and offset access over a single client.
    
    Usage::
    
        with ZkSession.from_config(get_config()) as session:
            for partition in session.metadata.get_partitions("events"):
                offset = session.offsets.get_last_commit("loader", partition)
    """
    
    def __init__(self, client: CoordinationClient, root: str = "/"):
        """
        Initialize session.
        
        Args:
            client: Coordination client, closed with the session
            root: ZooKeeper root of the Kafka configuration
        """
        self.client = client
        self.paths = ZkPaths(root)
        self.metadata = MetadataResolver(client, self.paths)
        self.offsets = OffsetStore(client, self.paths)
    
    @classmethod
    def from_config(cls, config: Config, configure_logs: bool = True) -> "ZkSession":
        """
        Connect to ZooKeeper using the ``zookeeper.*`` settings.
        
        This is the entry point for batch jobs: unless ``configure_logs``
        is False, logging is first set up from the ``logging.*`` settings.
        
        Args:
            config: Configuration
            configure_logs: Configure structlog from the same configuration
        
        Returns:
            Connected session
        
        Raises:
            CoordinationError: If the connection could not be established
        """
        if configure_logs:
            configure_from_config(config)
        
        client = KazooCoordinationClient.connect(
            hosts=config.get("zookeeper.connect"),
            session_timeout_ms=int(config.get("zookeeper.session_timeout_ms", 10000)),
            connection_timeout_ms=int(config.get("zookeeper.connection_timeout_ms", 10000)),
        )
        session = cls(client, root=config.get("zookeeper.root", "/"))
        
        logger.info("ZooKeeper session opened", root=session.paths.root)
        
        return session
    
    def get_data_by_path(self, relative_path: str) -> Optional[str]:
        """
        Read a node relative to the root.
        
        Args:
            relative_path: Path below the root, without leading separator
        
        Returns:
            Node value, or None if the node does not exist
        
        Raises:
            CoordinationError: If the read failed
            DecodeError: If the node does not hold valid text
        """
        return self.client.read_data(self.paths.with_root(relative_path), tolerate_missing=True)
    
    def close(self) -> None:
        self.client.close()
    
    def __enter__(self) -> "ZkSession":
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
