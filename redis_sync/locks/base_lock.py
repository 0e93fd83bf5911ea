"""
Base lock handle untuk semua lock kinds.
Mengintegrasikan state machine, background auto-refresh, dan lost-lock detection.

State machine:
    IDLE --acquire success--> ACQUIRED
    IDLE --acquire exhausted--> IDLE
    ACQUIRED --refresh failure--> LOST
    ACQUIRED --release--> RELEASED

LOST dan RELEASED adalah terminal untuk handle tersebut.
"""

import asyncio
import inspect
import logging
from enum import Enum
from typing import Optional

from ..errors import AcquireTimeoutError, LockStateError, LostLockError
from ..options import LockOptions, validate_key
from ..utils.metrics import metrics, measure_time

logger = logging.getLogger(__name__)


class LockState(Enum):
    """
    4 possible states untuk lock handle:
    - IDLE: Belum acquire (atau acquire gagal)
    - ACQUIRED: Lock dipegang, auto-refresh berjalan
    - RELEASED: Sudah release secara explicit
    - LOST: Refresh gagal, exclusivity tidak bisa dikonfirmasi lagi
    """
    IDLE = "idle"
    ACQUIRED = "acquired"
    RELEASED = "released"
    LOST = "lost"


class BaseLock:
    """
    Base class untuk lock handles.
    Subclass implement _acquire, _refresh, dan _release.

    Setiap handle punya maksimal satu refresh task. Semua state transitions
    adalah synchronous assignments di antara awaits, jadi release yang race
    dengan in-flight refresh selalu menang.
    """

    _kind = 'lock'

    def __init__(self, key: str, **options):
        """
        Args:
            key: Nama resource yang di-guard
            **options: identifier, lock_timeout, acquire_timeout,
                acquire_attempts_limit, retry_interval, refresh_interval,
                on_lock_lost, acquired_externally
        """
        self._key = validate_key(key)
        self._options = LockOptions.build(**options)

        self._state = LockState.IDLE
        self._acquiring = False
        self._refresh_task: Optional[asyncio.Task] = None

        # Error terakhir dari background refresh (None selama lock belum lost)
        self.lost_error: Optional[LostLockError] = None

    @property
    def key(self) -> str:
        return self._key

    @property
    def identifier(self) -> str:
        return self._options.identifier

    @property
    def options(self) -> LockOptions:
        return self._options

    @property
    def state(self) -> LockState:
        return self._state

    @property
    def is_acquired(self) -> bool:
        return self._state is LockState.ACQUIRED

    async def acquire(self):
        """
        Acquire lock dengan retry loop.

        Raises:
            AcquireTimeoutError: jika acquire_timeout atau acquire_attempts_limit habis
        """
        if not await self._acquire_with(self._options):
            raise AcquireTimeoutError(f"Acquire {self._kind} {self._key} timeout", key=self._key)

    async def try_acquire(self) -> bool:
        """Single attempt, tanpa retry loop. Returns False jika gagal"""
        return await self._acquire_with(self._options.single_attempt())

    async def release(self):
        """
        Release lock. No-op jika tidak sedang ACQUIRED.
        State jadi RELEASED apapun hasil server-side release.
        """
        if self._state is not LockState.ACQUIRED:
            return

        self._state = LockState.RELEASED
        await self._stop_refresh()
        metrics.record_release(self._kind)

        try:
            await self._release()
        except Exception as e:
            logger.warning(f"Error releasing {self._kind} {self._key}: {e}")

        logger.info(f"Released {self._kind} {self._key} ({self.identifier})")

    async def _acquire_with(self, options: LockOptions) -> bool:
        if self._state is not LockState.IDLE or self._acquiring:
            raise LockStateError(
                f"Cannot acquire {self._kind} {self._key}: handle is {self._state.value}"
            )

        self._acquiring = True
        try:
            with measure_time() as timer:
                if options.acquired_externally:
                    acquired = await self._confirm_external()
                else:
                    acquired = await self._acquire(options)
        finally:
            self._acquiring = False

        metrics.record_acquire(self._kind, acquired, timer.elapsed)

        if not acquired:
            logger.info(f"Failed to acquire {self._kind} {self._key} "
                        f"after {timer.elapsed * 1000:.0f}ms")
            return False

        self._state = LockState.ACQUIRED
        self._start_refresh()
        logger.info(f"Acquired {self._kind} {self._key} ({self.identifier})")
        return True

    async def _confirm_external(self) -> bool:
        """
        Handle yang acquired_externally skip acquire step.
        Satu refresh memastikan identifier masih terpasang di authority.
        """
        try:
            return await self._refresh()
        except Exception as e:
            logger.warning(f"Error confirming external {self._kind} {self._key}: {e}")
            return False

    def _start_refresh(self):
        """Start background refresh task (jika refresh_interval > 0)"""
        if self._options.refresh_interval <= 0:
            return
        self._refresh_task = asyncio.create_task(self._refresh_loop())

    async def _stop_refresh(self):
        """Cancel refresh task dan tunggu sampai selesai"""
        task, self._refresh_task = self._refresh_task, None
        if task is None or task is asyncio.current_task():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _refresh_loop(self):
        """
        Background loop untuk refresh lock setiap refresh_interval.
        Refresh gagal atau transport error -> lock dianggap LOST (fail safe).
        """
        interval = self._options.refresh_interval / 1000

        while self._state is LockState.ACQUIRED:
            await asyncio.sleep(interval)
            if self._state is not LockState.ACQUIRED:
                break

            try:
                refreshed = await self._refresh()
            except Exception as e:
                logger.warning(f"Error refreshing {self._kind} {self._key}: {e}")
                refreshed = False

            # release() bisa terjadi selama refresh berjalan
            if self._state is not LockState.ACQUIRED:
                break

            metrics.record_refresh(self._kind, refreshed)
            if not refreshed:
                await self._handle_lost()
                break

    async def _handle_lost(self):
        """Transition ke LOST dan notify on_lock_lost callback"""
        self._state = LockState.LOST
        self._refresh_task = None

        error = LostLockError(f"Lost {self._kind} for key {self._key}", key=self._key)
        self.lost_error = error
        metrics.record_lost(self._kind)

        callback = self._options.on_lock_lost
        if callback is None:
            # Tidak ada callback: surface ke event loop exception handler
            logger.error(f"{error} ({self.identifier}), no on_lock_lost callback registered")
            asyncio.get_running_loop().call_exception_handler({
                'message': f'Unhandled lost lock: {self._kind} {self._key}',
                'exception': error,
                'task': asyncio.current_task()
            })
            return

        logger.warning(f"{error} ({self.identifier})")
        try:
            result = callback(error)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Error in on_lock_lost callback for {self._key}: {e}")

    async def _acquire(self, options: LockOptions) -> bool:
        raise NotImplementedError

    async def _refresh(self) -> bool:
        raise NotImplementedError

    async def _release(self):
        raise NotImplementedError

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.release()
        return False

    def __repr__(self):
        return f"{self.__class__.__name__}({self._key}, {self._state.value})"
