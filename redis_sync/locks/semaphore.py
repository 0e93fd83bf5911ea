"""
Counting semaphore di atas satu Redis authority.
"""

import redis.asyncio as aioredis

from ..engines.semaphore import acquire_semaphore, refresh_semaphore, release_semaphore
from ..options import LockOptions, validate_client, validate_key, validate_limit
from .base_lock import BaseLock


class Semaphore(BaseLock):
    """
    Distributed semaphore: maksimal `limit` holders per key.
    Key di Redis di-prefix dengan "semaphore:".
    """

    _kind = 'semaphore'

    def __init__(self, client: aioredis.Redis, key: str, limit: int, **options):
        super().__init__(f"semaphore:{validate_key(key)}", **options)
        self._client = validate_client(client)
        self._limit = validate_limit(limit)

    @property
    def limit(self) -> int:
        return self._limit

    async def _acquire(self, options: LockOptions) -> bool:
        return await acquire_semaphore(self._client, self._key, self._limit, options)

    async def _refresh(self) -> bool:
        return await refresh_semaphore(
            self._client, self._key, self._limit, self.identifier, self._options.lock_timeout
        )

    async def _release(self):
        await release_semaphore(self._client, self._key, self.identifier)
