"""Exception classes untuk redis-sync."""

from typing import Optional


class LockError(Exception):
    """Base exception for all lock errors."""
    pass


class ValidationError(LockError, ValueError):
    """Raised when constructor arguments are invalid (sebelum network call apapun)."""
    pass


class LockStateError(LockError):
    """Raised when acquire() is called on a handle that is no longer idle."""
    pass


class AcquireTimeoutError(LockError):
    """Raised when the acquire loop exhausts its timeout or attempts budget."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class LostLockError(LockError):
    """Raised when exclusivity of a held lock can no longer be confirmed."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key
