"""
Quorum coordinator untuk multi-authority ("Redlock") locks.

Satu operation di-fan-out ke N independent Redis authorities secara parallel
dengan satu shared deadline. Lock dianggap dipegang jika lebih dari N/2
authorities setuju.

Ini best-effort majority algorithm, bukan Raft/Paxos:
- Tidak ada replication antar authorities
- Setiap authority menerima "now" sendiri (dihitung saat call di-issue)
- Yang dibatasi hanya total wall-clock time dari satu fan-out round
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Set

from ..options import LockOptions

logger = logging.getLogger(__name__)

Operation = Callable[[Any], Awaitable[bool]]


def majority(total: int) -> int:
    """Jumlah authorities minimal untuk majority (lebih dari total / 2)"""
    return total // 2 + 1


@dataclass
class QuorumResult:
    """
    Outcome dari satu fan-out round.

    outcomes: authority index -> True (success), False (refused),
    None (error atau tidak menjawab sebelum deadline; state server-side unknown)
    """
    total: int
    outcomes: Dict[int, Optional[bool]] = field(default_factory=dict)

    @property
    def quorum(self) -> int:
        return majority(self.total)

    @property
    def succeeded(self) -> Set[int]:
        return {i for i, ok in self.outcomes.items() if ok is True}

    @property
    def unanswered(self) -> Set[int]:
        return {i for i, ok in self.outcomes.items() if ok is None}

    @property
    def is_majority(self) -> bool:
        return len(self.succeeded) >= self.quorum

    def __repr__(self):
        return f"QuorumResult({len(self.succeeded)}/{self.total}, quorum={self.quorum})"


class QuorumCoordinator:
    """
    Fan-out operations ke N authorities dan hitung majority.

    held berisi index authorities yang saat ini dipercaya memegang record.
    """

    def __init__(self, clients: List[Any]):
        self.clients = list(clients)
        self.held: Set[int] = set()

    async def fan_out(self,
                      operation: Operation,
                      indices: Optional[Iterable[int]] = None,
                      timeout: Optional[float] = None) -> QuorumResult:
        """
        Jalankan operation(client) ke semua authorities di indices secara parallel.

        Args:
            operation: Coroutine function yang menerima satu client
            indices: Authority indices (default semua)
            timeout: Shared deadline dalam seconds (None = tanpa deadline)

        Returns:
            QuorumResult; exceptions dan calls yang belum selesai = unknown
        """
        if indices is None:
            indices = range(len(self.clients))

        result = QuorumResult(total=len(self.clients))
        tasks = {
            asyncio.ensure_future(operation(self.clients[i])): i
            for i in indices
        }
        if not tasks:
            return result

        try:
            done, pending = await asyncio.wait(tasks.keys(), timeout=timeout)
        except asyncio.CancelledError:
            # Caller di-cancel: jangan biarkan calls ke authorities tetap jalan
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        # Cancel yang melewati deadline dan tunggu sampai benar-benar selesai
        for task in pending:
            task.cancel()
            result.outcomes[tasks[task]] = None
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.debug(f"{len(pending)} authorities did not answer within {timeout}s")

        for task in done:
            index = tasks[task]
            if task.cancelled():
                result.outcomes[index] = None
                continue
            error = task.exception()
            if error is not None:
                logger.debug(f"Authority {index} failed: {error}")
                result.outcomes[index] = None
            else:
                result.outcomes[index] = bool(task.result())

        return result

    async def acquire(self,
                      attempt: Operation,
                      rollback: Operation,
                      options: LockOptions) -> bool:
        """
        Acquire di majority authorities.

        Setiap round:
        1. Fan-out attempt ke semua N dengan deadline min(lock_timeout, sisa acquire budget).
           Round pertama selalu di-issue; tanpa sisa budget deadline-nya lock_timeout
        2. Jika dapat majority -> held = authorities yang berhasil, return True
        3. Jika tidak -> rollback ke authorities yang berhasil atau tidak menjawab,
           lalu retry sampai acquire_timeout / acquire_attempts_limit habis

        Jika caller di-cancel di tengah acquire, rollback dijalankan ke semua N
        sebelum CancelledError diteruskan.
        """
        try:
            return await self._acquire_rounds(attempt, rollback, options)
        except asyncio.CancelledError:
            self.held = set()
            logger.debug("Acquire cancelled, rolling back on all authorities")
            await asyncio.shield(self.fan_out(rollback, timeout=options.lock_timeout / 1000))
            raise

    async def _acquire_rounds(self,
                              attempt: Operation,
                              rollback: Operation,
                              options: LockOptions) -> bool:
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        attempts = 0

        while True:
            attempts += 1
            elapsed_ms = (loop.time() - start_time) * 1000
            remaining_ms = max(options.acquire_timeout - elapsed_ms, 0)
            if attempts == 1 and remaining_ms == 0:
                deadline_ms = options.lock_timeout
            else:
                deadline_ms = min(options.lock_timeout, remaining_ms)

            result = await self.fan_out(attempt, timeout=deadline_ms / 1000)
            logger.debug(f"Acquire round {attempts}: {result}")

            if result.is_majority:
                self.held = result.succeeded
                return True

            stranded = result.succeeded | result.unanswered
            if stranded:
                await self.fan_out(rollback, stranded, timeout=options.lock_timeout / 1000)

            elapsed_ms = (loop.time() - start_time) * 1000
            if elapsed_ms >= options.acquire_timeout or attempts >= options.acquire_attempts_limit:
                self.held = set()
                return False

            await asyncio.sleep(options.retry_interval / 1000)

    async def refresh(self, operation: Operation, lock_timeout: int) -> bool:
        """
        Refresh semua authorities yang masih held.
        Majority tetap dihitung dari total N, bukan dari jumlah yang held.
        """
        result = await self.fan_out(operation, sorted(self.held), timeout=lock_timeout / 1000)
        self.held = result.succeeded
        if not result.is_majority:
            logger.warning(f"Refresh lost quorum: {result}")
        return result.is_majority

    async def release(self, operation: Operation, timeout: Optional[float] = None):
        """Best-effort release ke semua N authorities; tidak pernah raise"""
        result = await self.fan_out(operation, timeout=timeout)
        self.held = set()
        logger.debug(f"Released on {len(result.succeeded)}/{result.total} authorities")

