"""Consumer group offset tracking."""

from kafkazk.consumer.offset_store import NO_COMMIT, OffsetStore

__all__ = ["NO_COMMIT", "OffsetStore"]
