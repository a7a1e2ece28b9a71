"""
Validation Framework for the Projection Engine.

This module provides consistency checks for map projections.
"""

from validation.projection_checks import (
    ProjectionConsistencyChecker,
    ValidationResult,
)

__all__ = [
    "ProjectionConsistencyChecker",
    "ValidationResult",
]
