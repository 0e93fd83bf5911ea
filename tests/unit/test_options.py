"""
Unit tests untuk option defaults dan constructor validation.
Semua validation terjadi sebelum network call, jadi client dummy cukup.
"""

import math

import pytest

from redis_sync import (
    Mutex, Semaphore, RedlockMutex, RedlockSemaphore, LockState, ValidationError, Config,
    LockError, AcquireTimeoutError, LostLockError,
)
from redis_sync.options import LockOptions

client = object()


def test_defaults():
    options = LockOptions.build()

    assert options.lock_timeout == Config.LOCK_TIMEOUT
    assert options.acquire_timeout == Config.ACQUIRE_TIMEOUT
    assert options.retry_interval == Config.RETRY_INTERVAL
    assert options.refresh_interval == Config.LOCK_TIMEOUT // 2
    assert math.isinf(options.acquire_attempts_limit)
    assert options.on_lock_lost is None
    assert options.acquired_externally is False


def test_refresh_interval_follows_lock_timeout():
    assert LockOptions.build(lock_timeout=300).refresh_interval == 150
    assert LockOptions.build(lock_timeout=300, refresh_interval=0).refresh_interval == 0


def test_single_attempt_copy():
    options = LockOptions.build(identifier='111')
    single = options.single_attempt()

    assert single.acquire_attempts_limit == 1
    assert single.identifier == '111'
    assert math.isinf(options.acquire_attempts_limit)


def test_identifier_unique_per_handle():
    first = Mutex(client, 'key')
    second = Mutex(client, 'key')

    assert first.identifier != second.identifier
    assert first.state is LockState.IDLE
    assert first.is_acquired is False


def test_custom_identifier():
    assert Mutex(client, 'key', identifier='111').identifier == '111'


def test_semaphore_key_prefixed():
    assert Semaphore(client, 'key', 2).key == 'semaphore:key'
    assert RedlockSemaphore([client], 'key', 2).key == 'semaphore:key'
    assert Mutex(client, 'key').key == 'key'
    assert RedlockMutex([client], 'key').key == 'key'


@pytest.mark.parametrize('key', ['', None, 123])
def test_invalid_key(key):
    with pytest.raises(ValidationError):
        Mutex(client, key)


def test_missing_client():
    with pytest.raises(ValidationError):
        Mutex(None, 'key')


@pytest.mark.parametrize('limit', [None, 0, -1, 'a', 1.5, True])
def test_invalid_limit(limit):
    with pytest.raises(ValidationError):
        Semaphore(client, 'key', limit)


@pytest.mark.parametrize('clients', [[], None, client, 'redis://localhost', [client, None]])
def test_invalid_clients(clients):
    with pytest.raises(ValidationError):
        RedlockMutex(clients, 'key')


@pytest.mark.parametrize('options', [
    {'lock_timeout': 0},
    {'lock_timeout': -1},
    {'lock_timeout': 'fast'},
    {'lock_timeout': float('inf')},
    {'acquire_timeout': -5},
    {'acquire_attempts_limit': 0},
    {'retry_interval': -1},
    {'retry_interval': float('nan')},
    {'lock_timeout': 300, 'refresh_interval': 300},
    {'on_lock_lost': 'not callable'},
    {'identifier': ''},
    {'acquired_externally': True},
])
def test_invalid_options(options):
    with pytest.raises(ValidationError):
        Mutex(client, 'key', **options)


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        Semaphore(client, 'key', 0)


def test_errors_carry_optional_key():
    assert AcquireTimeoutError('Acquire mutex key timeout', key='key').key == 'key'
    assert LostLockError('Lost mutex key').key is None
    assert isinstance(LostLockError('Lost mutex key'), LockError)
