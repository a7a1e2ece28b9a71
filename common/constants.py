"""
Geodetic Constants for Map Projections.

This module provides the constants consumed by the projection engine, each
with its uncertainty bound and source. Linear values are in meters, angular
values in radians.

References
----------
- WGS84 parameters: NIMA TR8350.2, Third Edition, 2000
- Snyder, J.P. (1987). Map Projections - A Working Manual. USGS Prof. Paper 1395.
"""

from dataclasses import dataclass
from typing import Final
import numpy as np


@dataclass(frozen=True)
class Constant:
    """A constant with uncertainty and provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    uncertainty : float
        The standard uncertainty (1-sigma) of the constant.
    unit : str
        The SI unit of the constant.
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class GeodeticConstants:
    """Registry of constants used by the projection engine.

    Earth Geometry (WGS84)
    ----------------------
    These constants define the default reference ellipsoid. Projections
    built without an explicit ellipsoid use these values.

    Projection Numerics
    -------------------
    Angular constants and the tolerance used to detect the poles, where
    cylindrical projections are undefined.
    """

    # =========================================================================
    # WGS84 Ellipsoid Parameters
    # Reference: NIMA TR8350.2, Third Edition, 2000
    # =========================================================================

    EARTH_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_137.0,
        uncertainty=0.0,  # Defined exactly
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-major axis (equatorial radius) of WGS84 ellipsoid"
    )

    EARTH_FLATTENING: Final[Constant] = Constant(
        value=1.0 / 298.257223563,
        uncertainty=0.0,  # Defined exactly
        unit="dimensionless",
        source="WGS84, NIMA TR8350.2",
        description="Flattening of WGS84 ellipsoid: f = (a - b) / a"
    )

    # =========================================================================
    # Projection Numerics
    # =========================================================================

    PI: Final[float] = np.pi
    HALF_PI: Final[float] = np.pi / 2.0

    POLE_EPSILON: Final[Constant] = Constant(
        value=1.0e-10,
        uncertainty=0.0,
        unit="rad",
        source="GeoTools / Snyder (1987) conventions",
        description="Distance from ±π/2 within which a latitude counts as a pole"
    )

    EPSG_AUTHORITY: Final[str] = "EPSG"
    EPSG_MERCATOR_2SP_METHOD: Final[int] = 9805
