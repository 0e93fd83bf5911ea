"""
Mutex di atas satu Redis authority.
"""

import asyncio

import redis.asyncio as aioredis

from ..engines.mutex import acquire_mutex, refresh_mutex, release_mutex
from ..options import LockOptions, validate_client
from ..utils.config import Config, setup_logging
from .base_lock import BaseLock


class Mutex(BaseLock):
    """
    Distributed mutex: maksimal satu holder per key.

    Contoh penggunaan:
        mutex = Mutex(client, 'resource_A', lock_timeout=5000)
        async with mutex:
            ...
    """

    _kind = 'mutex'

    def __init__(self, client: aioredis.Redis, key: str, **options):
        super().__init__(key, **options)
        self._client = validate_client(client)

    async def _acquire(self, options: LockOptions) -> bool:
        return await acquire_mutex(self._client, self._key, options)

    async def _refresh(self) -> bool:
        return await refresh_mutex(
            self._client, self._key, self.identifier, self._options.lock_timeout
        )

    async def _release(self):
        await release_mutex(self._client, self._key, self.identifier)


# Test code
async def demo_mutex():
    """Demo: dua handle berebut satu key"""
    client = Config.create_clients()[0]

    first = Mutex(client, 'demo:resource', lock_timeout=1000, acquire_timeout=300)
    second = Mutex(client, 'demo:resource', lock_timeout=1000, acquire_timeout=300)

    await first.acquire()
    print(f"First: {first}")
    print(f"Second try_acquire: {await second.try_acquire()}")

    await first.release()
    print(f"Second try_acquire after release: {await second.try_acquire()}")
    await second.release()

    await client.aclose()


if __name__ == "__main__":
    setup_logging()
    Config.display()
    asyncio.run(demo_mutex())
