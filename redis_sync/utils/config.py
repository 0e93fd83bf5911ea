"""
Configuration manager untuk redis-sync.
File ini membaca environment variables dan menyediakan
default timeouts untuk semua lock handles.
"""

import logging
import math
import os
import sys
from typing import List

import redis.asyncio as aioredis
from dotenv import load_dotenv

# Load environment variables dari .env file
load_dotenv()


def _get_limit(name: str) -> float:
    """Parse optional integer limit; kosong berarti unbounded"""
    value = os.getenv(name, '')
    if not value:
        return math.inf
    return int(value)


class Config:
    """Class untuk manage semua konfigurasi library"""

    # Lock timeouts (dalam milliseconds)
    LOCK_TIMEOUT: int = int(os.getenv('LOCK_TIMEOUT', 10000))
    ACQUIRE_TIMEOUT: int = int(os.getenv('ACQUIRE_TIMEOUT', 10000))
    ACQUIRE_ATTEMPTS_LIMIT: float = _get_limit('ACQUIRE_ATTEMPTS_LIMIT')
    RETRY_INTERVAL: int = int(os.getenv('RETRY_INTERVAL', 10))

    # Logging
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE: str = os.getenv('LOG_FILE', '')

    @staticmethod
    def get_authorities() -> List[str]:
        """
        Parse Redis authorities dari environment variable.
        Format: "redis://host1:port1/0,redis://host2:port2/0"
        Returns: List of Redis URIs
        """
        uris_str = os.getenv('REDIS_URIS', 'redis://localhost:6379/0')
        return [uri.strip() for uri in uris_str.split(',') if uri.strip()]

    @classmethod
    def create_clients(cls) -> List[aioredis.Redis]:
        """
        Build satu redis.asyncio client per authority.
        Connection baru dibuka saat command pertama dikirim.
        """
        return [aioredis.Redis.from_url(uri) for uri in cls.get_authorities()]

    @classmethod
    def display(cls):
        """Print semua konfigurasi untuk debugging"""
        print("=== Configuration ===")
        print(f"Authorities: {cls.get_authorities()}")
        print(f"Lock timeout: {cls.LOCK_TIMEOUT}ms")
        print(f"Acquire timeout: {cls.ACQUIRE_TIMEOUT}ms")
        print(f"Acquire attempts limit: {cls.ACQUIRE_ATTEMPTS_LIMIT}")
        print(f"Retry interval: {cls.RETRY_INTERVAL}ms")
        print("=" * 30)


def setup_logging():
    """Setup logging configuration"""
    handlers = [logging.StreamHandler(sys.stdout)]
    if Config.LOG_FILE:
        handlers.append(logging.FileHandler(Config.LOG_FILE))

    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


# Test configuration saat file dijalankan langsung
if __name__ == "__main__":
    Config.display()
