"""
Core Infrastructure - Logging

Usage:
    from cloudpulse.core import get_logger, setup_logging

    setup_logging(level="INFO")
    logger = get_logger(__name__)
"""

from .logging_config import ContextFormatter, JSONFormatter, get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "JSONFormatter",
    "ContextFormatter",
]
