"""
Lock options dan constructor validation.

Semua durations dalam milliseconds. Semua validation terjadi synchronously
di constructor, sebelum ada network interaction.
"""

import math
import uuid
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Sequence

from .errors import ValidationError
from .utils.config import Config


@dataclass(frozen=True)
class LockOptions:
    """Resolved options untuk satu lock handle"""
    identifier: str
    lock_timeout: int
    acquire_timeout: float
    acquire_attempts_limit: float
    retry_interval: int
    refresh_interval: int
    on_lock_lost: Optional[Callable[[Exception], Any]] = None
    acquired_externally: bool = False

    @classmethod
    def build(cls,
              identifier: Optional[str] = None,
              lock_timeout: Optional[int] = None,
              acquire_timeout: Optional[float] = None,
              acquire_attempts_limit: Optional[float] = None,
              retry_interval: Optional[int] = None,
              refresh_interval: Optional[int] = None,
              on_lock_lost: Optional[Callable[[Exception], Any]] = None,
              acquired_externally: bool = False) -> 'LockOptions':
        """
        Apply defaults dari Config, lalu validate.

        refresh_interval default = lock_timeout / 2; 0 berarti auto-refresh disabled.
        """
        if lock_timeout is None:
            lock_timeout = Config.LOCK_TIMEOUT
        if acquire_timeout is None:
            acquire_timeout = Config.ACQUIRE_TIMEOUT
        if acquire_attempts_limit is None:
            acquire_attempts_limit = Config.ACQUIRE_ATTEMPTS_LIMIT
        if retry_interval is None:
            retry_interval = Config.RETRY_INTERVAL

        _check_number('lock_timeout', lock_timeout, allow_inf=False)
        if lock_timeout <= 0:
            raise ValidationError('"lock_timeout" must be greater than 0')
        _check_number('acquire_timeout', acquire_timeout, allow_inf=True)
        _check_number('acquire_attempts_limit', acquire_attempts_limit, allow_inf=True)
        if acquire_attempts_limit < 1:
            raise ValidationError('"acquire_attempts_limit" must be at least 1')
        _check_number('retry_interval', retry_interval, allow_inf=False)

        if refresh_interval is None:
            refresh_interval = lock_timeout // 2
        _check_number('refresh_interval', refresh_interval, allow_inf=False)
        if refresh_interval >= lock_timeout:
            raise ValidationError('"refresh_interval" must be less than "lock_timeout"')

        if on_lock_lost is not None and not callable(on_lock_lost):
            raise ValidationError('"on_lock_lost" must be callable')

        if identifier is None:
            if acquired_externally:
                raise ValidationError('"identifier" is required when "acquired_externally" is set')
            identifier = str(uuid.uuid4())
        elif not isinstance(identifier, str) or not identifier:
            raise ValidationError('"identifier" must be a non-empty string')

        return cls(
            identifier=identifier,
            lock_timeout=int(lock_timeout),
            acquire_timeout=acquire_timeout,
            acquire_attempts_limit=acquire_attempts_limit,
            retry_interval=int(retry_interval),
            refresh_interval=int(refresh_interval),
            on_lock_lost=on_lock_lost,
            acquired_externally=bool(acquired_externally)
        )

    def single_attempt(self) -> 'LockOptions':
        """Copy untuk try_acquire: satu attempt, tanpa retry loop"""
        return replace(self, acquire_attempts_limit=1)


def _check_number(name: str, value: Any, allow_inf: bool):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f'"{name}" must be a number')
    if math.isnan(value) or value < 0:
        raise ValidationError(f'"{name}" must be a non-negative number')
    if math.isinf(value) and not allow_inf:
        raise ValidationError(f'"{name}" must be finite')


def validate_key(key: Any) -> str:
    if not key:
        raise ValidationError('"key" is required')
    if not isinstance(key, str):
        raise ValidationError('"key" must be a string')
    return key


def validate_limit(limit: Any) -> int:
    if limit is None:
        raise ValidationError('"limit" is required')
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValidationError('"limit" must be an integer')
    if limit < 1:
        raise ValidationError('"limit" must be at least 1')
    return limit


def validate_client(client: Any) -> Any:
    if client is None:
        raise ValidationError('"client" is required')
    return client


def validate_clients(clients: Any) -> Sequence[Any]:
    if isinstance(clients, (str, bytes)) or not isinstance(clients, (list, tuple)):
        raise ValidationError('"clients" must be a list of Redis clients')
    if not clients:
        raise ValidationError('"clients" must contain at least one client')
    for client in clients:
        validate_client(client)
    return list(clients)
