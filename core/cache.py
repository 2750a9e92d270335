import asyncio

from persistence.backing_store import BackingStore
from .entry import Entry
from .response import CacheResponse


class LRUCache:
    """
    Fixed-capacity cache in front of a BackingStore.

    Entries live in `capacity` slots with a parallel rank table:
    rank 0 is the most recently touched slot and larger ranks were
    touched further in the past. On a miss with a full cache, the
    slot with the highest rank (lowest index on ties) is evicted.
    Writes go through to the backing store before the cache changes.
    """

    def __init__(self, capacity: int = 5, store="persistence/store.txt"):
        if capacity < 1:
            raise ValueError("Cache capacity must be positive.")
        self._capacity = capacity
        self._size = 0
        self.slots = [None] * capacity
        self.ranks = [0] * capacity

        if not isinstance(store, BackingStore):
            store = BackingStore(filepath=store)
        self.store = store

        self.lock = asyncio.Lock()

        self.stats = {
            "cache_hits": 0,
            "cache_misses": 0,
            "evictions": 0,
        }

    @property
    def capacity(self):
        return self._capacity

    @property
    def size(self):
        return self._size

    def reset(self):
        """Clear every slot and rank, as if newly constructed."""
        self._size = 0
        self.slots = [None] * self._capacity
        self.ranks = [0] * self._capacity
        for name in self.stats:
            self.stats[name] = 0

    def find(self, key: int):
        """Slot index holding key, or -1."""
        for i, entry in enumerate(self.slots):
            if entry is not None and entry.key == key:
                return i
        return -1

    def rank_of(self, key: int):
        """Current rank of key, or -1 if it is not cached."""
        index = self.find(key)
        if index < 0:
            return -1
        return self.ranks[index]

    def snapshot(self):
        return [entry.copy() if entry is not None else None for entry in self.slots]

    # --- Rank & Slot Helpers ---
    def _touch(self, index):
        self.ranks[index] = 0
        for i, entry in enumerate(self.slots):
            if i != index and entry is not None:
                self.ranks[i] += 1

    def _evict_candidate(self):
        max_rank = -1
        max_index = -1
        for i, entry in enumerate(self.slots):
            # Strict comparison keeps the lowest index on ties
            if entry is not None and self.ranks[i] > max_rank:
                max_rank = self.ranks[i]
                max_index = i
        return max_index

    def evict(self, incoming_key: int):
        """
        Free the least recently used slot for incoming_key and return its
        index. Returns -1 without evicting if the cache still has room or
        incoming_key is already cached.
        """
        if self._size < self._capacity:
            return -1
        if self.find(incoming_key) >= 0:
            return -1

        index = self._evict_candidate()
        evicted = self.slots[index]
        self.slots[index] = None
        self.ranks[index] = 0
        self._size -= 1
        self.stats["evictions"] += 1
        print(f"[Cache] Evicted key {evicted.key} from slot {index} for key {incoming_key}")
        return index

    def _install(self, key, value):
        index = -1
        if self._size >= self._capacity:
            index = self.evict(key)

        if index < 0:
            index = self.slots.index(None)

        self.slots[index] = Entry(key, value)
        self._size += 1
        return index

    # --- Core Logic ---
    async def read(self, key: int):
        async with self.lock:
            index = self.find(key)

            # 1. Cache Hit
            if index >= 0:
                self.stats["cache_hits"] += 1
                self._touch(index)
                return CacheResponse(self.slots[index].copy(), miss=False)

            # 2. Cache Miss: NotFoundError leaves the cache untouched
            fetched = await self.store.lookup(key)
            self.stats["cache_misses"] += 1
            index = self._install(key, fetched.value)
            self._touch(index)
            return CacheResponse(self.slots[index].copy(), miss=True, time=fetched.time_taken)

    async def write(self, key: int, new_value: int):
        async with self.lock:
            index = self.find(key)
            miss = index < 0
            elapsed = 0.0

            if miss:
                fetched = await self.store.lookup(key)
                elapsed = fetched.time_taken

            # Write-through: the store must accept the value before the cache changes
            await self.store.push(key, new_value)

            if miss:
                self.stats["cache_misses"] += 1
                index = self._install(key, new_value)
            else:
                self.stats["cache_hits"] += 1
                self.slots[index].value = new_value

            self._touch(index)
            return CacheResponse(self.slots[index].copy(), miss=miss, time=elapsed)

    def get_info(self):
        return (
            f"capacity: {self._capacity}\n"
            f"size: {self._size}\n"
            f"hits: {self.stats['cache_hits']}\n"
            f"misses: {self.stats['cache_misses']}\n"
            f"evictions: {self.stats['evictions']}"
        )
