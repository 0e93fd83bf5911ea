"""Single-authority acquire/refresh/release engines"""

from .retry import retry_acquire
from .mutex import acquire_mutex, refresh_mutex, release_mutex
from .semaphore import acquire_semaphore, refresh_semaphore, release_semaphore

__all__ = [
    'retry_acquire',
    'acquire_mutex', 'refresh_mutex', 'release_mutex',
    'acquire_semaphore', 'refresh_semaphore', 'release_semaphore'
]
