"""Tests for broker and partition records."""

import dataclasses

import pytest

from kafkazk.broker.metadata import Broker, Partition


class TestBroker:
    """Test Broker."""
    
    def test_endpoint(self):
        """Test endpoint generation."""
        broker = Broker(broker_id=1, host="kafka-1", port=9092)
        
        assert broker.endpoint() == "kafka-1:9092"
    
    def test_immutable(self):
        """Test brokers cannot be modified."""
        broker = Broker(broker_id=1, host="kafka-1", port=9092)
        
        with pytest.raises(dataclasses.FrozenInstanceError):
            broker.port = 9093
    
    def test_equality(self):
        """Test brokers compare by value."""
        assert Broker(1, "kafka-1", 9092) == Broker(1, "kafka-1", 9092)


class TestPartition:
    """Test Partition."""
    
    def test_partition_key(self):
        """Test offset key is the partition number."""
        broker = Broker(broker_id=4, host="kafka-4", port=9092)
        
        assert Partition("t1", 7, broker).partition_key == "7"
        assert Partition("t1", 7).partition_key == "7"
    
    def test_from_key(self):
        """Test rebuilding a partition from its key."""
        partition = Partition.from_key("t1", "3")
        
        assert partition.topic == "t1"
        assert partition.partition == 3
        assert partition.broker is None
    
    def test_from_invalid_key(self):
        """Test non-numeric keys are rejected."""
        with pytest.raises(ValueError):
            Partition.from_key("t1", "abc")
    
    def test_str(self):
        """Test string form."""
        assert str(Partition("events", 2)) == "events-2"
