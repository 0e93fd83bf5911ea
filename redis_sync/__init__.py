"""
Redis Synchronization Primitives

Distributed coordination di atas Redis:
- Mutex dan Semaphore untuk satu Redis authority
- RedlockMutex dan RedlockSemaphore dengan majority quorum di N authorities
- Auto-refresh dengan lost-lock detection
"""

from .errors import (
    LockError,
    ValidationError,
    LockStateError,
    AcquireTimeoutError,
    LostLockError,
)
from .options import LockOptions
from .locks import LockState, Mutex, Semaphore, RedlockMutex, RedlockSemaphore
from .utils import Config, metrics

__version__ = "1.0.0"

__all__ = [
    'Mutex', 'Semaphore', 'RedlockMutex', 'RedlockSemaphore',
    'LockState', 'LockOptions',
    'LockError', 'ValidationError', 'LockStateError', 'AcquireTimeoutError', 'LostLockError',
    'Config', 'metrics',
]
