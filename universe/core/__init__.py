"""
Core Application Components

Configuration and logging.
"""

from universe.core.config import Settings, settings
from universe.core.logging import configure_logging

__all__ = ["Settings", "settings", "configure_logging"]
