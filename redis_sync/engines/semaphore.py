"""
Single-authority semaphore engine.
Acquire retry loop, refresh, dan release di atas atomic semaphore scripts.
"""

import redis.asyncio as aioredis

from ..options import LockOptions
from ..scripts import semaphore as semaphore_ops
from ..utils.clock import now_ms
from .retry import retry_acquire


async def acquire_semaphore(client: aioredis.Redis, key: str, limit: int,
                            options: LockOptions) -> bool:
    """Retry acquire satu slot dari limit"""
    async def attempt() -> bool:
        return await semaphore_ops.acquire(
            client, key, limit, options.identifier, options.lock_timeout, now_ms()
        )

    return await retry_acquire(attempt, options, 'semaphore', key)


async def refresh_semaphore(client: aioredis.Redis, key: str, limit: int,
                            identifier: str, lock_timeout: int) -> bool:
    return await semaphore_ops.refresh(
        client, key, limit, identifier, lock_timeout, now_ms()
    )


async def release_semaphore(client: aioredis.Redis, key: str, identifier: str) -> bool:
    return await semaphore_ops.release(client, key, identifier)
