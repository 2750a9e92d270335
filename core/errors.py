class NotFoundError(LookupError):
    """Raised when a key has no record in the backing store."""

    def __init__(self, key, reason=None):
        self.key = key
        self.reason = reason
        message = f"key {key} not found"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
