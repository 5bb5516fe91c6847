"""
In-process coordination client.

Keeps a ZooKeeper-like node tree in memory. Used by tests and for running
jobs locally without a ZooKeeper ensemble.
"""

import threading
from typing import Dict, List, Optional

from kafkazk.zk.client import CoordinationClient, NodeExistsError, NoNodeError

ROOT = "/"


def _parent(path: str) -> str:
    parent = path.rsplit("/", 1)[0]
    return parent or ROOT


class InMemoryCoordinationClient(CoordinationClient):
    """
    Coordination client over an in-memory node tree.
    
    Nodes map absolute paths to text values. The root node always exists.
    """
    
    def __init__(self, nodes: Optional[Dict[str, str]] = None):
        """
        Initialize client.
        
        Args:
            nodes: Initial node values keyed by path; parents are created
        """
        self._nodes: Dict[str, str] = {ROOT: ""}
        self._lock = threading.RLock()
        self.closed = False
        
        for path, value in (nodes or {}).items():
            self.put(path, value)
    
    def put(self, path: str, value: str) -> None:
        """Create or overwrite a node, creating parents as needed."""
        with self._lock:
            if not self.exists(path):
                self.create_persistent(path, create_parents=True)
            self._nodes[path] = value
    
    def exists(self, path: str) -> bool:
        with self._lock:
            return path in self._nodes
    
    def create_persistent(self, path: str, create_parents: bool = False) -> None:
        with self._lock:
            if path in self._nodes:
                raise NodeExistsError(f"Node {path} already exists", path=path)
            
            parent = _parent(path)
            if parent not in self._nodes:
                if not create_parents:
                    raise NoNodeError(f"No node {parent}", path=parent)
                self.create_persistent(parent, create_parents=True)
            
            self._nodes[path] = ""
    
    def read_data(self, path: str, tolerate_missing: bool = False) -> Optional[str]:
        with self._lock:
            if path not in self._nodes:
                if tolerate_missing:
                    return None
                raise NoNodeError(f"No node {path}", path=path)
            return self._nodes[path]
    
    def write_data(self, path: str, data: str) -> None:
        with self._lock:
            if path not in self._nodes:
                raise NoNodeError(f"No node {path}", path=path)
            self._nodes[path] = data
    
    def get_children(self, path: str) -> List[str]:
        with self._lock:
            if path not in self._nodes:
                raise NoNodeError(f"No node {path}", path=path)
            
            prefix = path.rstrip("/") + "/"
            return sorted(
                node[len(prefix):]
                for node in self._nodes
                if node != path and node.startswith(prefix) and "/" not in node[len(prefix):]
            )
    
    def delete(self, path: str) -> None:
        with self._lock:
            if path not in self._nodes:
                raise NoNodeError(f"No node {path}", path=path)
            if self.get_children(path):
                raise NodeExistsError(f"Node {path} has children", path=path)
            del self._nodes[path]
    
    def close(self) -> None:
        self.closed = True
