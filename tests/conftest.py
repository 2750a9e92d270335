import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.cache import LRUCache
from persistence.backing_store import BackingStore


def write_store(path, count=10):
    with open(path, "w") as f:
        for i in range(count):
            f.write(f"{i} {i}\n")


@pytest.fixture
def store_path(tmp_path):
    """Backing store file holding keys 0..9 mapped to themselves."""
    path = tmp_path / "example1.txt"
    write_store(path)
    return str(path)


@pytest.fixture
def store(store_path):
    return BackingStore(store_path)


@pytest.fixture
def empty_cache(store):
    return LRUCache(capacity=4, store=store)


@pytest.fixture
async def partial_cache(empty_cache):
    await empty_cache.read(1)
    await empty_cache.read(2)
    return empty_cache


@pytest.fixture
async def full_cache(empty_cache):
    for key in (1, 2, 3, 4):
        await empty_cache.read(key)
    return empty_cache
