"""
Reference Ellipsoid Models.

This module defines the ellipsoid state that map projections read from:
semi-major axis, eccentricity and eccentricity squared, plus the radii of
curvature used when measuring projection distortion.

Scientific Context
------------------
Domain: Geodesy, Earth geometry
Model: Oblate ellipsoid of revolution (a sphere is the special case f = 0)

References
----------
- NIMA TR8350.2: WGS84 parameters
- Torge, W. (2001). Geodesy (3rd ed.). de Gruyter.
"""

from dataclasses import dataclass
import numpy as np

from common.constants import GeodeticConstants


@dataclass(frozen=True)
class EllipsoidParameters:
    """Parameters defining a reference ellipsoid.

    Attributes
    ----------
    a : float
        Semi-major axis (equatorial radius) in meters.
    f : float
        Flattening: f = (a - b) / a
    name : str
        Identifier for the ellipsoid.

    Derived Parameters
    ------------------
    b : float
        Semi-minor axis (polar radius) in meters.
    e2 : float
        First eccentricity squared: e² = (a² - b²) / a²
    e : float
        First eccentricity.
    """
    a: float
    f: float
    name: str

    @classmethod
    def from_axes(
        cls,
        semi_major: float,
        semi_minor: float,
        name: str = "custom"
    ) -> 'EllipsoidParameters':
        """Create an ellipsoid from its two semi-axes.

        Parameters
        ----------
        semi_major, semi_minor : float
            Equatorial and polar radii in meters.
        name : str
            Identifier for the ellipsoid.

        Returns
        -------
        EllipsoidParameters
            Ellipsoid with flattening (a - b) / a.
        """
        return cls(a=semi_major, f=(semi_major - semi_minor) / semi_major, name=name)

    @classmethod
    def sphere(cls, radius: float, name: str = "sphere") -> 'EllipsoidParameters':
        """Create a spherical model (zero flattening)."""
        return cls(a=radius, f=0.0, name=name)

    @property
    def b(self) -> float:
        """Semi-minor axis in meters."""
        return self.a * (1 - self.f)

    @property
    def e2(self) -> float:
        """First eccentricity squared."""
        return self.f * (2 - self.f)

    @property
    def e(self) -> float:
        """First eccentricity."""
        return np.sqrt(self.e2)


# WGS84 ellipsoid - the default reference for projections
WGS84Ellipsoid = EllipsoidParameters(
    a=GeodeticConstants.EARTH_SEMI_MAJOR_AXIS.value,
    f=GeodeticConstants.EARTH_FLATTENING.value,
    name="WGS84"
)


def radius_of_curvature_meridian(
    latitude_rad: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
) -> float:
    """Compute the radius of curvature in the meridian plane.

    Parameters
    ----------
    latitude_rad : float
        Geodetic latitude in radians.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    float
        Radius of curvature M in meters.

    Notes
    -----
    M = a(1 - e²) / (1 - e² sin²φ)^(3/2)

    At the equator (φ=0): M ≈ 6,335,439 m
    At the poles (φ=±90°): M ≈ 6,399,594 m
    """
    sin_lat = np.sin(latitude_rad)
    denominator = (1 - ellipsoid.e2 * sin_lat**2) ** 1.5
    return ellipsoid.a * (1 - ellipsoid.e2) / denominator


def radius_of_curvature_prime_vertical(
    latitude_rad: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
) -> float:
    """Compute the radius of curvature in the prime vertical.

    Parameters
    ----------
    latitude_rad : float
        Geodetic latitude in radians.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    float
        Radius of curvature N in meters.

    Notes
    -----
    N = a / (1 - e² sin²φ)^(1/2)

    At the equator (φ=0): N = a ≈ 6,378,137 m
    """
    sin_lat = np.sin(latitude_rad)
    denominator = np.sqrt(1 - ellipsoid.e2 * sin_lat**2)
    return ellipsoid.a / denominator
