"""
Common utilities and infrastructure for the projection engine.

This package provides foundational components used across all modules:
- Geodetic constants with uncertainty bounds
- Logging infrastructure
"""

from common.constants import Constant, GeodeticConstants
from common.logging_config import get_logger

__all__ = [
    "Constant",
    "GeodeticConstants",
    "get_logger",
]
