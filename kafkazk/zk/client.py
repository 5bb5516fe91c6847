"""
Coordination service clients.

Defines the hierarchical key-value store contract used by the metadata
resolver and the offset store, and its ZooKeeper implementation on kazoo.
Node values are UTF-8 text.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional

from kazoo.client import KazooClient
from kazoo.exceptions import KazooException
from kazoo.exceptions import NodeExistsError as KazooNodeExistsError
from kazoo.exceptions import NoNodeError as KazooNoNodeError
from kazoo.handlers.threading import KazooTimeoutError

from kafkazk.utils.logging import get_logger
from kafkazk.zk.codec import DecodeError

logger = get_logger(__name__)


class CoordinationError(Exception):
    """Coordination service call failed."""
    
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class NoNodeError(CoordinationError):
    """Node does not exist."""
    pass


class NodeExistsError(CoordinationError):
    """Node already exists."""
    pass


class CoordinationClient(ABC):
    """Hierarchical key-value store client."""
    
    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check whether a node exists."""
    
    @abstractmethod
    def create_persistent(self, path: str, create_parents: bool = False) -> None:
        """
        Create an empty persistent node.
        
        Args:
            path: Node path
            create_parents: Create missing intermediate nodes
        
        Raises:
            NodeExistsError: If the node already exists
            NoNodeError: If the parent is missing and create_parents is False
        """
    
    @abstractmethod
    def read_data(self, path: str, tolerate_missing: bool = False) -> Optional[str]:
        """
        Read a node's value.
        
        Args:
            path: Node path
            tolerate_missing: Return None instead of raising when absent
        
        Raises:
            NoNodeError: If the node is absent and tolerate_missing is False
            DecodeError: If the stored bytes are not valid text
        """
    
    @abstractmethod
    def write_data(self, path: str, data: str) -> None:
        """
        Overwrite an existing node's value.
        
        Raises:
            NoNodeError: If the node is absent
        """
    
    @abstractmethod
    def get_children(self, path: str) -> List[str]:
        """
        List child node names.
        
        Raises:
            NoNodeError: If the parent node is absent
        """
    
    @abstractmethod
    def delete(self, path: str) -> None:
        """
        Delete a node.
        
        Raises:
            NoNodeError: If the node is absent
        """
    
    @abstractmethod
    def close(self) -> None:
        """Release the connection."""
    
    def get_children_if_exists(self, path: str) -> List[str]:
        """List child node names, treating an absent parent as empty."""
        try:
            return self.get_children(path)
        except NoNodeError:
            return []
    
    def __enter__(self) -> "CoordinationClient":
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


@contextmanager
def _translate_errors(path: str) -> Iterator[None]:
    """Map kazoo failures onto CoordinationError types."""
    try:
        yield
    except KazooNoNodeError as e:
        raise NoNodeError(f"No node {path}", path=path) from e
    except KazooNodeExistsError as e:
        raise NodeExistsError(f"Node {path} already exists", path=path) from e
    except (KazooException, KazooTimeoutError) as e:
        raise CoordinationError(
            f"ZooKeeper call on {path} failed: {type(e).__name__}", path=path
        ) from e


class KazooCoordinationClient(CoordinationClient):
    """
    ZooKeeper client backed by kazoo.
    
    Wraps a started KazooClient. Values are stored as UTF-8 bytes.
    """
    
    def __init__(self, zk: KazooClient):
        """
        Initialize client.
        
        Args:
            zk: Started kazoo client
        """
        self._zk = zk
    
    @classmethod
    def connect(
        cls,
        hosts: str,
        session_timeout_ms: int = 10000,
        connection_timeout_ms: int = 10000,
    ) -> "KazooCoordinationClient":
        """
        Connect to ZooKeeper.
        
        Args:
            hosts: Connection string, e.g. ``zk-1:2181,zk-2:2181``
            session_timeout_ms: Session timeout in milliseconds
            connection_timeout_ms: Time to wait for the connection in milliseconds
        
        Returns:
            Connected client
        
        Raises:
            CoordinationError: If the connection could not be established
        """
        zk = KazooClient(hosts=hosts, timeout=session_timeout_ms / 1000.0)
        
        with _translate_errors(hosts):
            zk.start(timeout=connection_timeout_ms / 1000.0)
        
        logger.info(
            "Connected to ZooKeeper",
            hosts=hosts,
            session_timeout_ms=session_timeout_ms,
        )
        
        return cls(zk)
    
    def exists(self, path: str) -> bool:
        with _translate_errors(path):
            return self._zk.exists(path) is not None
    
    def create_persistent(self, path: str, create_parents: bool = False) -> None:
        with _translate_errors(path):
            self._zk.create(path, b"", makepath=create_parents)
    
    def read_data(self, path: str, tolerate_missing: bool = False) -> Optional[str]:
        try:
            with _translate_errors(path):
                data, _stat = self._zk.get(path)
        except NoNodeError:
            if tolerate_missing:
                return None
            raise
        
        if data is None:
            return None
        
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Node {path} is not valid UTF-8: {e}") from e
    
    def write_data(self, path: str, data: str) -> None:
        with _translate_errors(path):
            self._zk.set(path, data.encode("utf-8"))
    
    def get_children(self, path: str) -> List[str]:
        with _translate_errors(path):
            return self._zk.get_children(path)
    
    def delete(self, path: str) -> None:
        with _translate_errors(path):
            self._zk.delete(path)
    
    def close(self) -> None:
        self._zk.stop()
        self._zk.close()
        
        logger.info("ZooKeeper client closed")
