"""
Core utilities shared across the application.
"""

from .logger import setup_logging
from .redis_connection import RedisConnection

__all__ = ["RedisConnection", "setup_logging"]
