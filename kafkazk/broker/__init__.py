"""Broker and partition records."""

from kafkazk.broker.metadata import Broker, Partition

__all__ = ["Broker", "Partition"]
