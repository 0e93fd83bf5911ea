"""Atomic server-side operations per lock kind"""

from . import mutex, semaphore

__all__ = ['mutex', 'semaphore']
