"""Structured logging for ffweb.

Provides configurable logging with JSON format support and file rotation.
"""

from ffweb.logging.config import configure_logging
from ffweb.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "configure_logging",
]
