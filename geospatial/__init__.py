"""
Geospatial Module for the Projection Engine.

This module provides:
- Reference ellipsoid models
- Named projection parameters
- The generic math transform and map projection base classes
- The Mercator projection (1SP and 2SP) with distortion tracking
"""

from geospatial.coordinate_models import (
    EllipsoidParameters,
    WGS84Ellipsoid,
    radius_of_curvature_meridian,
    radius_of_curvature_prime_vertical,
)

from geospatial.parameters import (
    ProjectionParameter,
    ParameterList,
)

from geospatial.transforms import (
    MathTransform,
    MapProjection,
    ProjectionDomainError,
    TransformDirection,
)

from geospatial.projections import (
    Mercator,
    MercatorMode,
    TissotIndicatrix,
    compute_tissot_indicatrix,
)

__all__ = [
    # Ellipsoids
    "EllipsoidParameters",
    "WGS84Ellipsoid",
    "radius_of_curvature_meridian",
    "radius_of_curvature_prime_vertical",
    # Parameters
    "ProjectionParameter",
    "ParameterList",
    # Transforms
    "MathTransform",
    "MapProjection",
    "ProjectionDomainError",
    "TransformDirection",
    # Projections
    "Mercator",
    "MercatorMode",
    "TissotIndicatrix",
    "compute_tissot_indicatrix",
]
