class Entry:
    def __init__(self, key: int, value: int = 0):
        self.key = key
        self.value = value

    def copy(self):
        """Return a detached Entry with the same key and value."""
        return Entry(self.key, self.value)

    def __eq__(self, other):
        if not isinstance(other, Entry):
            return NotImplemented
        return self.key == other.key and self.value == other.value

    def __repr__(self):
        return f"Entry(key={self.key}, value={self.value})"

    def __str__(self):
        return f"({self.key},{self.value})"
