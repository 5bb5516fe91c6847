"""Tests for metadata decoding."""

import json

import pytest

from kafkazk.zk.codec import (
    BrokerRecord,
    DecodeError,
    INT64_MAX,
    INT64_MIN,
    decode_broker,
    decode_offset,
    decode_topic,
    encode_offset,
)


class TestDecodeBroker:
    """Test broker registration decoding."""
    
    def test_decode_broker(self):
        """Test decoding a full registration."""
        record = decode_broker(json.dumps({
            "jmx_port": "9999",
            "timestamp": "1438696380000",
            "endpoints": ["PLAINTEXT://kafka-1:9092"],
            "host": "kafka-1",
            "version": "2",
            "port": 9092,
        }))
        
        assert record == BrokerRecord(
            host="kafka-1",
            port=9092,
            jmx_port="9999",
            timestamp="1438696380000",
            endpoints=("PLAINTEXT://kafka-1:9092",),
            version="2",
        )
    
    def test_numeric_fields_normalized(self):
        """Test numeric version and jmx_port become strings."""
        record = decode_broker('{"host": "kafka-1", "port": 9092, "jmx_port": -1, "version": 2}')
        
        assert record.jmx_port == "-1"
        assert record.version == "2"
        assert record.endpoints == ()
    
    def test_invalid_json(self):
        """Test non-JSON payload."""
        with pytest.raises(DecodeError):
            decode_broker("not json")
    
    def test_not_an_object(self):
        """Test JSON that is not an object."""
        with pytest.raises(DecodeError):
            decode_broker("[1, 2]")
    
    def test_missing_host(self):
        """Test registration without host."""
        with pytest.raises(DecodeError):
            decode_broker('{"port": 9092}')
    
    def test_invalid_port(self):
        """Test non-integer port."""
        with pytest.raises(DecodeError):
            decode_broker('{"host": "kafka-1", "port": "9092"}')
    
    def test_invalid_endpoints(self):
        """Test endpoints that are not strings."""
        with pytest.raises(DecodeError):
            decode_broker('{"host": "kafka-1", "port": 9092, "endpoints": [1]}')


class TestDecodeTopic:
    """Test topic assignment decoding."""
    
    def test_decode_topic(self):
        """Test decoding replica assignment."""
        metadata = decode_topic('{"version": 1, "partitions": {"0": [1, 2], "1": [2, 3]}}')
        
        assert metadata.version == "1"
        assert metadata.partitions == {0: (1, 2), 1: (2, 3)}
    
    def test_broker_ids(self):
        """Test collecting referenced broker ids."""
        metadata = decode_topic('{"version": "1", "partitions": {"0": [1, 2], "1": [2, 3]}}')
        
        assert metadata.broker_ids() == {1, 2, 3}
    
    def test_missing_partitions(self):
        """Test record without partitions."""
        with pytest.raises(DecodeError):
            decode_topic('{"version": 1}')
    
    def test_invalid_partition_number(self):
        """Test non-numeric partition key."""
        with pytest.raises(DecodeError):
            decode_topic('{"partitions": {"x": [1]}}')
    
    def test_invalid_broker_id(self):
        """Test non-integer replica."""
        with pytest.raises(DecodeError):
            decode_topic('{"partitions": {"0": ["1"]}}')


class TestOffsetPayload:
    """Test offset payloads."""
    
    def test_decode_offset(self):
        """Test decimal offsets."""
        assert decode_offset("42") == 42
        assert decode_offset("0") == 0
        assert decode_offset(" 9223372036854775807\n") == 9223372036854775807
    
    def test_decode_invalid_offset(self):
        """Test non-numeric offsets."""
        with pytest.raises(DecodeError):
            decode_offset("forty-two")
    
    def test_decode_rejects_non_decimal(self):
        """Test only plain decimal digits are accepted."""
        for data in ("1_000", "0x10", "1e3", "4.0", "--1", "\u0661"):
            with pytest.raises(DecodeError):
                decode_offset(data)
    
    def test_decode_int64_bounds(self):
        """Test offsets must fit in a signed 64-bit integer."""
        assert decode_offset(str(INT64_MAX)) == INT64_MAX
        assert decode_offset(str(INT64_MIN)) == INT64_MIN
        
        with pytest.raises(DecodeError):
            decode_offset(str(INT64_MAX + 1))
        
        with pytest.raises(DecodeError):
            decode_offset(str(INT64_MIN - 1))
    
    def test_encode_offset(self):
        """Test offsets are written as decimal text."""
        assert encode_offset(42) == "42"
