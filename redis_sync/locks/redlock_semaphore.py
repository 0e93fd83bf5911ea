"""
Redlock semaphore: counting semaphore di atas N independent Redis authorities.
"""

from typing import Any, List

from ..engines.semaphore import refresh_semaphore, release_semaphore
from ..options import LockOptions, validate_key, validate_limit
from ..scripts import semaphore as semaphore_ops
from ..utils.clock import now_ms
from .redlock_mutex import RedlockMutex


class RedlockSemaphore(RedlockMutex):
    """
    Multi-authority semaphore.
    Slot dipegang jika lebih dari N/2 authorities menerima identifier di sorted set mereka.
    """

    _kind = 'redlock-semaphore'

    def __init__(self, clients: List[Any], key: str, limit: int, **options):
        super().__init__(clients, f"semaphore:{validate_key(key)}", **options)
        self._limit = validate_limit(limit)

    @property
    def limit(self) -> int:
        return self._limit

    async def _attempt_one(self, client: Any, options: LockOptions) -> bool:
        return await semaphore_ops.acquire(
            client, self._key, self._limit, options.identifier, options.lock_timeout, now_ms()
        )

    async def _refresh_one(self, client: Any) -> bool:
        return await refresh_semaphore(
            client, self._key, self._limit, self.identifier, self._options.lock_timeout
        )

    async def _release_one(self, client: Any) -> bool:
        return await release_semaphore(client, self._key, self.identifier)
