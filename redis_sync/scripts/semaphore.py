"""
Atomic semaphore operations over a sorted set.

Member = holder identifier, score = timestamp (ms) saat terakhir di-acquire/refresh.
Entries dengan score < now - lock_timeout dianggap expired dan di-prune
dalam script yang sama dengan capacity check, jadi concurrent acquirers
tidak bisa lost update.

Known limitation: "now" datang dari clock caller. Jika clock acquirer lebih
cepat dari clock holder lebih dari lock_timeout, entry holder akan di-prune
walaupun holder masih refresh. Ini sama dengan "fair" semaphore klasik
di atas sorted set; acceptable skew bound adalah lock_timeout.
"""

import logging
from typing import Optional

import redis.asyncio as aioredis

from ..utils.clock import now_ms

logger = logging.getLogger(__name__)


ACQUIRE_LUA = """
local key = KEYS[1]
local limit = tonumber(ARGV[1])
local identifier = ARGV[2]
local lockTimeout = tonumber(ARGV[3])
local now = tonumber(ARGV[4])
redis.call('zremrangebyscore', key, '-inf', '(' .. (now - lockTimeout))
if redis.call('zcard', key) < limit then
  redis.call('zadd', key, now, identifier)
  redis.call('pexpire', key, lockTimeout)
  return 1
end
return 0
"""

REFRESH_LUA = """
local key = KEYS[1]
local limit = tonumber(ARGV[1])
local identifier = ARGV[2]
local lockTimeout = tonumber(ARGV[3])
local now = tonumber(ARGV[4])
redis.call('zremrangebyscore', key, '-inf', '(' .. (now - lockTimeout))
if redis.call('zscore', key, identifier) then
  redis.call('zadd', key, now, identifier)
  redis.call('pexpire', key, lockTimeout)
  return 1
end
return 0
"""


async def acquire(client: aioredis.Redis, key: str, limit: int, identifier: str,
                  lock_timeout: int, now: int) -> bool:
    """
    Prune expired entries, lalu insert (now, identifier) jika size < limit.
    """
    script = client.register_script(ACQUIRE_LUA)
    result = await script(
        keys=[key],
        args=[int(limit), identifier, int(lock_timeout), int(now)]
    )
    logger.debug(f"semaphore acquire {key} ({identifier}) at {now}: {result}")
    return result == 1


async def refresh(client: aioredis.Redis, key: str, limit: int, identifier: str,
                  lock_timeout: int, now: Optional[int] = None) -> bool:
    """
    Prune expired entries, lalu update score identifier ke now.
    Returns False jika entry sudah hilang (expired atau di-evict).
    """
    if now is None:
        now = now_ms()
    script = client.register_script(REFRESH_LUA)
    result = await script(
        keys=[key],
        args=[int(limit), identifier, int(lock_timeout), int(now)]
    )
    return result == 1


async def release(client: aioredis.Redis, key: str, identifier: str) -> bool:
    """Remove entry identifier; True jika memang ada yang di-remove"""
    removed = await client.zrem(key, identifier)
    return removed == 1
