"""
Unit tests untuk lock metrics.
"""

import pytest
from prometheus_client import REGISTRY

from redis_sync import Mutex, metrics
from redis_sync.utils.metrics import measure_time


def sample(name, **labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.mark.asyncio
async def test_acquire_and_release_counted(client):
    acquired_before = sample('lock_acquire_total', kind='mutex', result='acquired')
    failed_before = sample('lock_acquire_total', kind='mutex', result='failed')
    released_before = sample('lock_release_total', kind='mutex')

    first = Mutex(client, 'key')
    second = Mutex(client, 'key')
    await first.acquire()
    assert await second.try_acquire() is False
    await first.release()

    assert sample('lock_acquire_total', kind='mutex', result='acquired') == acquired_before + 1
    assert sample('lock_acquire_total', kind='mutex', result='failed') == failed_before + 1
    assert sample('lock_release_total', kind='mutex') == released_before + 1


def test_export_format():
    metrics.record_acquire('semaphore', True, 0.01)
    data = metrics.get_metrics()

    assert b'lock_acquire_total' in data
    assert b'lock_acquire_latency_seconds' in data


def test_measure_time():
    with measure_time() as timer:
        pass
    assert timer.elapsed >= 0
