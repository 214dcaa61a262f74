"""Test doubles for bucketfs."""

from bucketfs.testing.memory_store import InMemoryObjectStore, StoreOp

__all__ = ["InMemoryObjectStore", "StoreOp"]
