"""
Single-authority mutex engine.
Acquire retry loop, refresh, dan release di atas atomic mutex scripts.
"""

import redis.asyncio as aioredis

from ..options import LockOptions
from ..scripts import mutex as mutex_ops
from ..utils.clock import now_ms
from .retry import retry_acquire


async def acquire_mutex(client: aioredis.Redis, key: str, options: LockOptions) -> bool:
    """Retry acquire sampai berhasil atau budget dari options habis"""
    async def attempt() -> bool:
        return await mutex_ops.acquire(
            client, key, options.identifier, options.lock_timeout, now_ms()
        )

    return await retry_acquire(attempt, options, 'mutex', key)


async def refresh_mutex(client: aioredis.Redis, key: str, identifier: str,
                        lock_timeout: int) -> bool:
    return await mutex_ops.refresh(client, key, identifier, lock_timeout)


async def release_mutex(client: aioredis.Redis, key: str, identifier: str) -> bool:
    return await mutex_ops.release(client, key, identifier)
