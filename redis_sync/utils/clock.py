"""Local wall clock dalam milliseconds."""

import time


def now_ms() -> int:
    """
    Current local time in ms.
    Semua atomic scripts menerima "now" dari sini, bukan dari clock authority.
    """
    return int(time.time() * 1000)
