class StoreError(Exception):
    """Raised by the store when a read or write cannot be completed."""


class UsernameConflictError(StoreError):
    """Raised when a client write violates the case-insensitive username constraint."""

    def __init__(self, username):
        super().__init__(f"username already exists: {username}")
        self.username = username
