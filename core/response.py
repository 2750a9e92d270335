from .entry import Entry


class CacheResponse:
    """
    Result of a single cache request: a copy of the touched entry,
    whether the request missed, and the backing store scan cost it paid.
    """

    def __init__(self, entry: Entry, miss: bool = False, time: float = 0.0):
        self.entry = entry
        self.miss = miss
        self.time = time

    @property
    def key(self):
        return self.entry.key

    @property
    def value(self):
        return self.entry.value

    def __repr__(self):
        return f"CacheResponse({self.entry!r}, miss={self.miss}, time={self.time})"
