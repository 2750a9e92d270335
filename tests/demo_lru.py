import os
import sys
import asyncio
import tempfile

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.simulator import CacheSimulator, Request
from persistence.backing_store import BackingStore


async def send_requests(sim, requests):
    for request in requests:
        print(f"Sending: {request!r}")
        await sim.run([request])
        print(f"Cache: {sim.render()}")


async def run_demo():
    with tempfile.TemporaryDirectory() as tmp:
        store_path = os.path.join(tmp, "store.txt")
        await BackingStore(store_path).seed((i, i) for i in range(16))
        sim = CacheSimulator.from_store(10, store_path)

        print("\n--- Phase 1: Filling Cache to Capacity (10 keys) ---")
        await send_requests(sim, [Request(i) for i in range(1, 11)])

        print("\n--- Phase 2: Demonstrating MRU (Most Recently Used) ---")
        print("Accessing key 1 so it becomes the most recently used...")
        await send_requests(sim, [Request(1)])

        print("\n--- Phase 3: Triggering Eviction ---")
        print("Writing key 11. Since key 1 was recently used, key 2 should be evicted!")
        await send_requests(sim, [Request(11, 110)])

        print("\n--- Phase 4: Verifying Results ---")
        cache = sim.cache
        if cache.find(1) >= 0 and cache.find(2) < 0:
            print("\nSUCCESS: LRU logic worked! key 2 was evicted, key 1 was preserved.")
        else:
            print("\nCHECK: Verify the logic in core/cache.py.")
        print(cache.get_info())


if __name__ == "__main__":
    asyncio.run(run_demo())
