"""
Metrics collector menggunakan Prometheus.
File ini mengumpulkan data lock lifecycle seperti
jumlah acquire, refresh, lost locks, dan acquire latency.
"""

from prometheus_client import Counter, Histogram, Gauge, generate_latest
import time


class MetricsCollector:
    """
    Class untuk mengumpulkan metrics lock.
    Semua metrics di-label dengan "kind" (mutex, semaphore, redlock-mutex, ...).
    """

    def __init__(self):
        # Counter: nilai yang selalu naik
        self.acquire_count = Counter(
            'lock_acquire_total',
            'Total number of acquire calls',
            ['kind', 'result']
        )

        self.refresh_count = Counter(
            'lock_refresh_total',
            'Total number of background refreshes',
            ['kind', 'result']
        )

        self.lost_count = Counter(
            'lock_lost_total',
            'Total number of locks lost while held',
            ['kind']
        )

        self.release_count = Counter(
            'lock_release_total',
            'Total number of releases of held locks',
            ['kind']
        )

        # Histogram: distribusi acquire time (termasuk retries)
        self.acquire_latency = Histogram(
            'lock_acquire_latency_seconds',
            'Acquire latency in seconds',
            ['kind']
        )

        # Gauge: nilai yang bisa naik/turun
        self.locks_held = Gauge(
            'locks_held',
            'Number of locks currently held by this process',
            ['kind']
        )

    def record_acquire(self, kind: str, acquired: bool, duration: float):
        """
        Record acquire metrics.

        Args:
            kind: Lock kind
            acquired: True jika lock didapat
            duration: Acquire duration in seconds
        """
        result = 'acquired' if acquired else 'failed'
        self.acquire_count.labels(kind=kind, result=result).inc()
        self.acquire_latency.labels(kind=kind).observe(duration)
        if acquired:
            self.locks_held.labels(kind=kind).inc()

    def record_refresh(self, kind: str, refreshed: bool):
        """Record hasil satu background refresh"""
        result = 'refreshed' if refreshed else 'failed'
        self.refresh_count.labels(kind=kind, result=result).inc()

    def record_lost(self, kind: str):
        """Lock hilang saat masih dipegang"""
        self.lost_count.labels(kind=kind).inc()
        self.locks_held.labels(kind=kind).dec()

    def record_release(self, kind: str):
        """Lock dilepas secara explicit"""
        self.release_count.labels(kind=kind).inc()
        self.locks_held.labels(kind=kind).dec()

    def get_metrics(self) -> bytes:
        """
        Export metrics dalam Prometheus format.
        Returns: Metrics data dalam bytes
        """
        return generate_latest()


# Context manager untuk measure acquire time
class measure_time:
    """
    Context manager untuk mengukur execution time.

    Contoh penggunaan:
        with measure_time() as timer:
            await mutex.acquire()
        print(f"Execution time: {timer.elapsed}s")
    """

    def __init__(self):
        self.start_time = None
        self.elapsed = None

    def __enter__(self):
        self.start_time = time.monotonic()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.monotonic() - self.start_time
        return False


# Singleton instance
metrics = MetricsCollector()
