from .cache import LRUCache
from .errors import NotFoundError

FAILURE = "FAILURE"


class Request:
    """A read when value is None, otherwise a write of value to key."""

    def __init__(self, key: int, value: int = None):
        self.key = key
        self.value = value

    @property
    def is_write(self):
        return self.value is not None

    def __repr__(self):
        if self.is_write:
            return f"Request(key={self.key}, value={self.value})"
        return f"Request(key={self.key})"


class CacheSimulator:
    """
    Replays requests against a single cache and keeps an audit trail:
    the rendered cache before the first request and after every request,
    with "FAILURE" in place of the state for requests whose key was
    not found.
    """

    def __init__(self, cache: LRUCache):
        self.cache = cache
        self._responses = []
        self._history = []

    @classmethod
    def from_store(cls, capacity: int, store_path: str):
        return cls(LRUCache(capacity=capacity, store=store_path))

    async def run(self, requests):
        self._history.append(self.render())
        for request in requests:
            try:
                if request.is_write:
                    response = await self.cache.write(request.key, request.value)
                else:
                    response = await self.cache.read(request.key)
            except NotFoundError as e:
                print(f"[Simulator] {request!r} failed: {e}")
                self._history.append(FAILURE)
                continue

            self._responses.append(response)
            self._history.append(self.render())

    async def simulate(self, keys):
        await self.run([Request(key) for key in keys])

    def reset(self):
        """Clear tallies and history. The cache's contents are left as they are."""
        self._responses.clear()
        self._history.clear()

    def miss_count(self):
        return sum(1 for response in self._responses if response.miss)

    def total_time(self):
        return sum(response.time for response in self._responses)

    def history(self):
        return list(self._history)

    def responses(self):
        return list(self._responses)

    def render(self):
        tokens = []
        for entry in self.cache.snapshot():
            tokens.append(str(entry) if entry is not None else "()")
        return " ".join(tokens)
