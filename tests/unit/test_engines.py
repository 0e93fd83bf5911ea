"""
Unit tests untuk acquire retry loop dan single-authority engines.
"""

import asyncio
import time

import pytest
from redis.exceptions import ConnectionError

from redis_sync.engines import (
    retry_acquire,
    acquire_mutex, refresh_mutex, release_mutex,
    acquire_semaphore, refresh_semaphore, release_semaphore,
)
from redis_sync import RedlockMutex, RedlockSemaphore
from redis_sync.options import LockOptions


def opts(identifier: str, **overrides) -> LockOptions:
    values = dict(
        identifier=identifier,
        acquire_timeout=50,
        lock_timeout=100,
        retry_interval=10
    )
    values.update(overrides)
    return LockOptions.build(**values)


class Attempts:
    """Scripted attempt function yang mencatat jumlah calls"""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self) -> bool:
        self.calls += 1
        outcome = self.outcomes.pop(0) if self.outcomes else False
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.mark.asyncio
async def test_retry_returns_on_first_success():
    attempt = Attempts(True)
    assert await retry_acquire(attempt, opts('111'), 'mutex', 'key') is True
    assert attempt.calls == 1


@pytest.mark.asyncio
async def test_retry_respects_attempts_limit():
    attempt = Attempts()
    options = opts('111', acquire_attempts_limit=3, acquire_timeout=float('inf'))

    assert await retry_acquire(attempt, options, 'mutex', 'key') is False
    assert attempt.calls == 3


@pytest.mark.asyncio
async def test_retry_respects_acquire_timeout():
    attempt = Attempts()
    start = time.monotonic()

    assert await retry_acquire(attempt, opts('111', acquire_timeout=50), 'mutex', 'key') is False

    elapsed = time.monotonic() - start
    assert elapsed >= 0.05
    assert attempt.calls >= 2


@pytest.mark.asyncio
async def test_retry_treats_errors_as_failed_attempts():
    attempt = Attempts(ConnectionError('down'), False, True)
    assert await retry_acquire(attempt, opts('111'), 'mutex', 'key') is True
    assert attempt.calls == 3


@pytest.mark.asyncio
async def test_retry_always_makes_one_attempt():
    attempt = Attempts(True)
    assert await retry_acquire(attempt, opts('111', acquire_timeout=0), 'mutex', 'key') is True


@pytest.mark.asyncio
async def test_redlock_try_acquire_always_makes_one_round(clients):
    mutex = RedlockMutex(clients, 'key', acquire_timeout=0, refresh_interval=0)
    semaphore = RedlockSemaphore(clients, 'key', 2, acquire_timeout=0, refresh_interval=0)

    assert await mutex.try_acquire() is True
    assert [await c.get('key') for c in clients] == [mutex.identifier] * 3
    assert await semaphore.try_acquire() is True
    assert [await c.zcard('semaphore:key') for c in clients] == [1] * 3

    await mutex.release()
    await semaphore.release()


@pytest.mark.asyncio
async def test_acquire_mutex_timeout(client):
    assert await acquire_mutex(client, 'key', opts('111')) is True
    assert await acquire_mutex(client, 'key', opts('222')) is False


@pytest.mark.asyncio
async def test_acquire_mutex_waits_for_auto_release(client):
    """Acquire kedua menunggu sampai lock pertama expired"""
    start = time.monotonic()
    assert await acquire_mutex(client, 'key', opts('111')) is True
    assert await acquire_mutex(client, 'key', opts('222', acquire_timeout=500)) is True
    assert time.monotonic() - start >= 0.05
    assert await client.get('key') == '222'


@pytest.mark.asyncio
async def test_acquire_mutex_per_key(client):
    results = await asyncio.gather(
        acquire_mutex(client, 'key1', opts('a1')),
        acquire_mutex(client, 'key2', opts('a2'))
    )
    assert results == [True, True]


@pytest.mark.asyncio
async def test_mutex_refresh_and_release(client):
    await acquire_mutex(client, 'key', opts('111'))

    assert await refresh_mutex(client, 'key', '222', 10000) is False
    assert await refresh_mutex(client, 'key', '111', 10000) is True
    assert await client.pttl('key') > 5000

    assert await release_mutex(client, 'key', '111') is True
    assert await client.get('key') is None


@pytest.mark.asyncio
async def test_semaphore_engine(client):
    assert await acquire_semaphore(client, 'key', 2, opts('111')) is True
    assert await acquire_semaphore(client, 'key', 2, opts('222')) is True
    assert await acquire_semaphore(client, 'key', 2, opts('333')) is False
    await asyncio.sleep(0.005)

    assert await refresh_semaphore(client, 'key', 2, '111', 100) is True
    assert await client.zrange('key', 0, -1) == ['222', '111']

    assert await release_semaphore(client, 'key', '111') is True
    assert await acquire_semaphore(client, 'key', 2, opts('333')) is True
