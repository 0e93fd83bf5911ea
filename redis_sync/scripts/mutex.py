"""
Atomic mutex operations.

Setiap operation adalah satu Lua script yang dijalankan server-side,
jadi check-and-set terjadi dalam satu round trip tanpa intermediate state.
Record: Redis string key -> identifier dengan PX TTL = lock_timeout.
"""

import logging

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)


ACQUIRE_LUA = """
local key = KEYS[1]
local identifier = ARGV[1]
local lockTimeout = tonumber(ARGV[2])
if redis.call('set', key, identifier, 'NX', 'PX', lockTimeout) then
  return 1
end
return 0
"""

REFRESH_LUA = """
local key = KEYS[1]
local identifier = ARGV[1]
local lockTimeout = tonumber(ARGV[2])
if redis.call('get', key) == identifier then
  redis.call('pexpire', key, lockTimeout)
  return 1
end
return 0
"""

RELEASE_LUA = """
local key = KEYS[1]
local identifier = ARGV[1]
if redis.call('get', key) == identifier then
  return redis.call('del', key)
end
return 0
"""


async def acquire(client: aioredis.Redis, key: str, identifier: str,
                  lock_timeout: int, now: int) -> bool:
    """
    Bind key -> identifier jika key kosong atau sudah expired.

    `now` tidak dipakai oleh script: expiry mutex adalah TTL record itu sendiri,
    jadi authority clock tidak pernah dibaca untuk keputusan ini.
    """
    script = client.register_script(ACQUIRE_LUA)
    result = await script(keys=[key], args=[identifier, int(lock_timeout)])
    logger.debug(f"mutex acquire {key} ({identifier}) at {now}: {result}")
    return result == 1


async def refresh(client: aioredis.Redis, key: str, identifier: str,
                  lock_timeout: int) -> bool:
    """Extend TTL hanya jika value masih sama dengan identifier"""
    script = client.register_script(REFRESH_LUA)
    result = await script(keys=[key], args=[identifier, int(lock_timeout)])
    return result == 1


async def release(client: aioredis.Redis, key: str, identifier: str) -> bool:
    """Delete key hanya jika value masih sama dengan identifier"""
    script = client.register_script(RELEASE_LUA)
    result = await script(keys=[key], args=[identifier])
    return result == 1
