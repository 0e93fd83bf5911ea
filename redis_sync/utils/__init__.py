"""
Utils package initialization.
Import semua utilities di sini agar mudah diakses.
"""

from .config import Config, setup_logging
from .metrics import metrics, measure_time
from .clock import now_ms

__all__ = ['Config', 'setup_logging', 'metrics', 'measure_time', 'now_ms']
