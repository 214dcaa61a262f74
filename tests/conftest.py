"""Global pytest configuration.

Unit tests run from the project root; scripts under `scripts/` are imported as
`scripts.*`, so the root must be on `sys.path`.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from bucketfs.adapter import BucketAdapter
from bucketfs.testing.memory_store import InMemoryObjectStore


def pytest_configure() -> None:
    root_dir = Path(__file__).resolve().parents[1]

    raw = str(root_dir)
    if raw not in sys.path:
        sys.path.insert(0, raw)


@pytest.fixture
def store() -> InMemoryObjectStore:
    return InMemoryObjectStore("bucket")


@pytest.fixture
def adapter(store: InMemoryObjectStore) -> BucketAdapter:
    return BucketAdapter(store)
