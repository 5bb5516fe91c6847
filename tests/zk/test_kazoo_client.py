"""Tests for the kazoo-backed coordination client."""

from unittest.mock import MagicMock, patch

import pytest
from kazoo.exceptions import ConnectionLoss
from kazoo.exceptions import NodeExistsError as KazooNodeExistsError
from kazoo.exceptions import NoNodeError as KazooNoNodeError
from kazoo.handlers.threading import KazooTimeoutError

from kafkazk.zk.client import (
    CoordinationError,
    KazooCoordinationClient,
    NodeExistsError,
    NoNodeError,
)
from kafkazk.zk.codec import DecodeError


class TestKazooCoordinationClient:
    """Test KazooCoordinationClient."""
    
    @pytest.fixture
    def zk(self):
        """Create mock kazoo client."""
        return MagicMock()
    
    @pytest.fixture
    def client(self, zk):
        """Create client over the mock."""
        return KazooCoordinationClient(zk)
    
    def test_connect(self):
        """Test connecting converts timeouts to seconds."""
        with patch("kafkazk.zk.client.KazooClient") as kazoo_client:
            client = KazooCoordinationClient.connect(
                "zk-1:2181,zk-2:2181",
                session_timeout_ms=6000,
                connection_timeout_ms=2500,
            )
        
        kazoo_client.assert_called_once_with(hosts="zk-1:2181,zk-2:2181", timeout=6.0)
        kazoo_client.return_value.start.assert_called_once_with(timeout=2.5)
        assert isinstance(client, KazooCoordinationClient)
    
    def test_connect_timeout(self):
        """Test connection timeout surfaces as CoordinationError."""
        with patch("kafkazk.zk.client.KazooClient") as kazoo_client:
            kazoo_client.return_value.start.side_effect = KazooTimeoutError("Connection time-out")
            
            with pytest.raises(CoordinationError):
                KazooCoordinationClient.connect("zk-1:2181")
    
    def test_exists(self, client, zk):
        """Test existence check."""
        zk.exists.return_value = object()
        assert client.exists("/a")
        
        zk.exists.return_value = None
        assert not client.exists("/a")
    
    def test_create_persistent(self, client, zk):
        """Test creating an empty node."""
        client.create_persistent("/a/b", create_parents=True)
        
        zk.create.assert_called_once_with("/a/b", b"", makepath=True)
    
    def test_create_existing(self, client, zk):
        """Test node-exists translation."""
        zk.create.side_effect = KazooNodeExistsError()
        
        with pytest.raises(NodeExistsError):
            client.create_persistent("/a")
    
    def test_read_data(self, client, zk):
        """Test values are decoded as UTF-8."""
        zk.get.return_value = (b"42", MagicMock())
        
        assert client.read_data("/a") == "42"
    
    def test_read_missing(self, client, zk):
        """Test reading a missing node."""
        zk.get.side_effect = KazooNoNodeError()
        
        assert client.read_data("/a", tolerate_missing=True) is None
        
        with pytest.raises(NoNodeError) as exc_info:
            client.read_data("/a")
        
        assert exc_info.value.path == "/a"
    
    def test_read_invalid_utf8(self, client, zk):
        """Test undecodable bytes raise DecodeError, not UnicodeDecodeError."""
        zk.get.return_value = (b"\xff", MagicMock())
        
        with pytest.raises(DecodeError):
            client.read_data("/a", tolerate_missing=True)
    
    def test_read_none_value(self, client, zk):
        """Test node without data."""
        zk.get.return_value = (None, MagicMock())
        
        assert client.read_data("/a") is None
    
    def test_write_data(self, client, zk):
        """Test values are encoded as UTF-8."""
        client.write_data("/a", "42")
        
        zk.set.assert_called_once_with("/a", b"42")
    
    def test_get_children(self, client, zk):
        """Test listing children."""
        zk.get_children.return_value = ["1", "2"]
        
        assert client.get_children("/brokers/ids") == ["1", "2"]
    
    def test_get_children_if_exists(self, client, zk):
        """Test missing parent is treated as empty."""
        zk.get_children.side_effect = KazooNoNodeError()
        
        assert client.get_children_if_exists("/brokers/ids") == []
    
    def test_connection_loss(self, client, zk):
        """Test connection failures surface as CoordinationError."""
        zk.get_children.side_effect = ConnectionLoss()
        
        with pytest.raises(CoordinationError) as exc_info:
            client.get_children_if_exists("/brokers/ids")
        
        assert not isinstance(exc_info.value, NoNodeError)
    
    def test_delete(self, client, zk):
        """Test deleting a node."""
        client.delete("/a")
        
        zk.delete.assert_called_once_with("/a")
    
    def test_close(self, client, zk):
        """Test closing stops the session."""
        client.close()
        
        zk.stop.assert_called_once()
        zk.close.assert_called_once()
