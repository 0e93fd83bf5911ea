"""Lock handles package initialization"""

from .base_lock import BaseLock, LockState
from .mutex import Mutex
from .semaphore import Semaphore
from .redlock_mutex import RedlockMutex
from .redlock_semaphore import RedlockSemaphore

__all__ = ['BaseLock', 'LockState', 'Mutex', 'Semaphore', 'RedlockMutex', 'RedlockSemaphore']
