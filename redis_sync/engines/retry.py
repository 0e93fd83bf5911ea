"""
Acquire retry loop yang dipakai oleh semua engines.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from ..options import LockOptions

logger = logging.getLogger(__name__)


async def retry_acquire(attempt: Callable[[], Awaitable[bool]],
                        options: LockOptions,
                        kind: str,
                        key: str) -> bool:
    """
    Jalankan attempt() sampai berhasil atau budget habis.

    Loop:
    1. Call attempt(); True -> return True
    2. False atau transport error -> failed attempt biasa
    3. Stop jika elapsed >= acquire_timeout atau attempts >= acquire_attempts_limit
    4. Sleep retry_interval, lalu ulang

    Minimal satu attempt selalu dijalankan.
    """
    loop = asyncio.get_running_loop()
    start_time = loop.time()
    attempts = 0

    while True:
        attempts += 1
        try:
            if await attempt():
                logger.debug(f"Acquired {kind} {key} after {attempts} attempt(s)")
                return True
        except Exception as e:
            logger.warning(f"Error acquiring {kind} {key} (attempt {attempts}): {e}")

        elapsed_ms = (loop.time() - start_time) * 1000
        if elapsed_ms >= options.acquire_timeout or attempts >= options.acquire_attempts_limit:
            logger.debug(f"Gave up on {kind} {key} after {attempts} attempt(s), "
                         f"{elapsed_ms:.0f}ms")
            return False

        await asyncio.sleep(options.retry_interval / 1000)
