"""
Redlock mutex: mutex di atas N independent Redis authorities.

Lock dipegang jika lebih dari N/2 authorities menerima acquire.
Jika refresh kehilangan majority, lock dianggap LOST walaupun sebagian
authorities masih menyimpan record, karena competing quorum bisa terbentuk.
"""

from typing import Any, List

from ..consensus.quorum import QuorumCoordinator
from ..engines.mutex import refresh_mutex, release_mutex
from ..options import LockOptions, validate_clients
from ..scripts import mutex as mutex_ops
from ..utils.clock import now_ms
from .base_lock import BaseLock


class RedlockMutex(BaseLock):
    """
    Multi-authority mutex.
    Subclass override _attempt_one, _refresh_one, dan _release_one untuk lock kind lain.
    """

    _kind = 'redlock-mutex'

    def __init__(self, clients: List[Any], key: str, **options):
        super().__init__(key, **options)
        self._coordinator = QuorumCoordinator(validate_clients(clients))

    @property
    def clients(self) -> List[Any]:
        return self._coordinator.clients

    async def _attempt_one(self, client: Any, options: LockOptions) -> bool:
        """Satu acquire attempt ke satu authority, dengan now milik call ini"""
        return await mutex_ops.acquire(
            client, self._key, options.identifier, options.lock_timeout, now_ms()
        )

    async def _refresh_one(self, client: Any) -> bool:
        return await refresh_mutex(client, self._key, self.identifier, self._options.lock_timeout)

    async def _release_one(self, client: Any) -> bool:
        return await release_mutex(client, self._key, self.identifier)

    async def _acquire(self, options: LockOptions) -> bool:
        async def attempt(client: Any) -> bool:
            return await self._attempt_one(client, options)

        return await self._coordinator.acquire(attempt, self._release_one, options)

    async def _confirm_external(self) -> bool:
        # Record foreign identifier bisa ada di authority manapun
        self._coordinator.held = set(range(len(self.clients)))
        return await super()._confirm_external()

    async def _refresh(self) -> bool:
        return await self._coordinator.refresh(self._refresh_one, self._options.lock_timeout)

    async def _release(self):
        await self._coordinator.release(
            self._release_one, timeout=self._options.lock_timeout / 1000
        )
