"""
Process-wide settings for the anomaly detection job service.

Usage:
    # Check a configuration
    python -m src.settings.cli --config service.properties
"""

from .config import ConfigError, ProcessConfiguration
from .schema import PRINT_IGNORED, SETTINGS, Setting

__all__ = ["ConfigError", "PRINT_IGNORED", "ProcessConfiguration", "SETTINGS", "Setting"]
