"""
Mercator Projection with Distortion Tracking.

This module implements the ellipsoidal Mercator projection in its two EPSG
parameterizations, and the Tissot indicatrix machinery used to quantify the
distortion of any projection built on `MapProjection`.

Scientific Context
------------------
Domain: Cartography, mathematical geodesy
Model: Conformal cylindrical projection on the reference ellipsoid

The Mercator projection maps meridians to equally spaced vertical lines and
parallels to horizontal lines spaced ever farther apart towards the poles.
Every straight line on the map is a rhumb line, which is why it remains the
standard for navigation charts. It is undefined at the poles.

Parameterizations
-----------------
- Mercator (1SP), ``Mercator_1SP``: the scale factor at the natural origin
  is given explicitly as ``scale_factor``.
- Mercator (2SP), ``Mercator_2SP``, EPSG method 9805: no scale factor is
  given; it is derived from the standard parallel ``latitude_of_origin``.

References
----------
- Snyder, J.P. (1987). Map Projections - A Working Manual. USGS Prof. Paper 1395.
- IOGP Publication 373-7-2, Geomatics Guidance Note 7 part 2.
- Tissot, A. (1859). Mémoire sur la représentation des surfaces.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
import numpy as np

from pyproj import CRS

from common.constants import GeodeticConstants
from common.logging_config import get_logger
from geospatial.coordinate_models import (
    EllipsoidParameters,
    radius_of_curvature_meridian,
    radius_of_curvature_prime_vertical
)
from geospatial.parameters import ParameterSource
from geospatial.transforms import (
    MapProjection,
    ProjectionDomainError,
    TransformDirection
)

logger = get_logger(__name__)


@dataclass
class TissotIndicatrix:
    """Tissot's indicatrix describing local distortion at a point.

    The Tissot indicatrix shows how an infinitesimally small circle
    on the Earth's surface is distorted into an ellipse on the map.

    Attributes
    ----------
    semi_major : float
        Semi-major axis of the distortion ellipse (maximum scale factor).
    semi_minor : float
        Semi-minor axis of the distortion ellipse (minimum scale factor).
    orientation_rad : float
        Orientation of the major axis in radians (from east).
    area_scale : float
        Area distortion factor.
    angular_distortion_rad : float
        Maximum angular distortion in radians.

    Notes
    -----
    - For a conformal projection: semi_major = semi_minor (circle, no angular distortion)
    - For an equal-area projection: area_scale = 1.0 (but shapes are distorted)
    """
    semi_major: float
    semi_minor: float
    orientation_rad: float
    area_scale: float
    angular_distortion_rad: float

    @property
    def is_conformal(self) -> bool:
        """Check if projection is locally conformal (circle, no angular distortion)."""
        return np.abs(self.semi_major - self.semi_minor) < 1e-6

    @property
    def is_equal_area(self) -> bool:
        """Check if projection is locally equal-area."""
        return np.abs(self.area_scale - 1.0) < 1e-6


class MercatorMode(Enum):
    """Parameterization of a Mercator projection, valued by its display name."""
    ONE_STANDARD_PARALLEL = "Mercator_1SP"
    TWO_STANDARD_PARALLEL = "Mercator_2SP"


class Mercator(MapProjection):
    """Ellipsoidal Mercator projection.

    Parameters
    ----------
    parameters : ParameterList, iterable of ProjectionParameter, or mapping
        Recognized names: ``central_meridian`` and ``latitude_of_origin``
        (degrees), ``scale_factor``, ``false_easting`` and ``false_northing``
        (meters), and optionally ``semi_major``/``semi_minor``.
    ellipsoid : EllipsoidParameters, optional
        Reference ellipsoid; see `MapProjection`.
    direction : TransformDirection
        FORWARD instances map radians to meters in `transform`, INVERSE
        instances map meters to radians. Use `inverse()` to obtain the
        reciprocal of an existing instance.

    Notes
    -----
    The presence of ``scale_factor`` selects Mercator_1SP and uses it as is.
    Zero or negative values are accepted and produce a degenerate or
    mirrored map. Without it, Mercator_2SP derives k0 from
    ``latitude_of_origin``:

        k0 = cos(φ0) / sqrt(1 - e² sin²φ0)

    False easting and northing are not applied.

    Examples
    --------
    >>> merc = Mercator({"central_meridian": 0.0, "scale_factor": 1.0})
    >>> x, y = merc.transform(np.radians(10.0), np.radians(45.0))
    >>> round(x, 1), round(y, 1)
    (1113194.9, 5591295.9)
    """

    def __init__(
        self,
        parameters: ParameterSource,
        ellipsoid: Optional[EllipsoidParameters] = None,
        direction: TransformDirection = TransformDirection.FORWARD
    ):
        super().__init__(parameters, ellipsoid=ellipsoid, direction=direction)

        scale_factor = self._parameters.get_parameter("scale_factor")

        if scale_factor is None:
            sin_lat = np.sin(self._lat_origin)
            self._k0 = float(
                np.cos(self._lat_origin) / np.sqrt(1.0 - self._es * sin_lat * sin_lat)
            )
            self._mode = MercatorMode.TWO_STANDARD_PARALLEL
            self._authority_code = GeodeticConstants.EPSG_MERCATOR_2SP_METHOD
        else:
            if scale_factor <= 0.0:
                logger.warning(
                    f"Mercator scale_factor={scale_factor} is not positive; "
                    f"the projected plane will be degenerate or mirrored"
                )
            self._k0 = float(scale_factor)
            self._mode = MercatorMode.ONE_STANDARD_PARALLEL

        self._name = self._mode.value

        logger.debug(
            f"Initialized {self._name} ({self._direction.value}) on "
            f"{self._ellipsoid.name}: k0={self._k0:.12f}, "
            f"central_meridian={self._central_meridian:.12f} rad"
        )

    @property
    def scale_at_origin(self) -> float:
        """Scale factor k0 at the natural origin."""
        return self._k0

    @property
    def mode(self) -> MercatorMode:
        return self._mode

    @property
    def proj4_string(self) -> str:
        lon_0 = float(np.degrees(self._central_meridian))
        if self._mode is MercatorMode.ONE_STANDARD_PARALLEL:
            scale = f"+k_0={self._k0:.15g}"
        else:
            scale = f"+lat_ts={float(np.degrees(self._lat_origin)):.15g}"
        return (
            f"+proj=merc +lon_0={lon_0:.15g} {scale} +x_0=0 +y_0=0 "
            f"+a={self._ellipsoid.a:.15g} +b={self._ellipsoid.b:.15g} "
            "+units=m +no_defs"
        )

    @property
    def preserves_angles(self) -> bool:
        return True

    @property
    def preserves_area(self) -> bool:
        return False

    def to_crs(self) -> CRS:
        """Build the PROJ coordinate reference system for this projection."""
        return CRS.from_proj4(self.proj4_string)

    def radians_to_meters(self, lon: float, lat: float) -> Tuple[float, float]:
        """Project geodetic coordinates to the Mercator plane.

        Parameters
        ----------
        lon, lat : float
            Geodetic longitude and latitude in radians.

        Returns
        -------
        Tuple[float, float]
            (x, y) in meters. (NaN, NaN) if either input is NaN.

        Raises
        ------
        ProjectionDomainError
            If the latitude is within `EPSLN` of either pole.
        """
        if np.isnan(lon) or np.isnan(lat):
            return np.nan, np.nan

        if np.abs(np.abs(lat) - self.HALF_PI) <= self.EPSLN:
            logger.debug(f"Rejected latitude {lat!r} rad at the pole")
            raise ProjectionDomainError("Transformation cannot be computed at the poles.")

        esinphi = self._e * np.sin(lat)
        x = self._semi_major * self._k0 * (lon - self._central_meridian)
        # Latitudes beyond ±π/2 give NaN
        with np.errstate(invalid='ignore'):
            y = self._semi_major * self._k0 * np.log(
                np.tan(self.PI * 0.25 + lat * 0.5)
                * np.power((1 - esinphi) / (1 + esinphi), self._e * 0.5)
            )
        return float(x), float(y)

    def meters_to_radians(self, x: float, y: float) -> Tuple[float, float]:
        """Recover geodetic coordinates from the Mercator plane.

        Latitude follows from the conformal latitude χ through the series
        of Snyder (1987) eq. 3-5, truncated after the e⁸ terms. No domain
        checks are made; degenerate input yields NaN or infinite output.

        Parameters
        ----------
        x, y : float
            Projected coordinates in meters.

        Returns
        -------
        Tuple[float, float]
            (lon, lat) in radians.
        """
        ak0 = np.float64(self._semi_major * self._k0)
        es = self._es
        e4 = self._e ** 4
        e6 = self._e ** 6
        e8 = self._e ** 8

        with np.errstate(all='ignore'):
            ts = np.exp(-y / ak0)
            chi = self.HALF_PI - 2 * np.arctan(ts)

            lat = (
                chi
                + (es * 0.5 + 5 * e4 / 24 + e6 / 12 + 13 * e8 / 360) * np.sin(2 * chi)
                + (7 * e4 / 48 + 29 * e6 / 240 + 811 * e8 / 11520) * np.sin(4 * chi)
                + (7 * e6 / 120 + 81 * e8 / 1120) * np.sin(6 * chi)
                + (4279 * e8 / 161280) * np.sin(8 * chi)
            )
            lon = x / ak0 + self._central_meridian

        return float(lon), float(lat)

    def compute_distortion(self, lon_rad: float, lat_rad: float) -> TissotIndicatrix:
        """Compute the local distortion analytically.

        Parameters
        ----------
        lon_rad, lat_rad : float
            Location in geodetic coordinates (radians).

        Returns
        -------
        TissotIndicatrix
            Local distortion characteristics.

        Notes
        -----
        The Mercator projection is conformal, so the meridian and parallel
        scale factors agree: h = k = k0 * sqrt(1 - e² sin²φ) / cos φ.
        The scale does not depend on longitude.
        """
        sin_lat = np.sin(lat_rad)
        k = self._k0 * np.sqrt(1 - self._es * sin_lat**2) / np.cos(lat_rad)

        return TissotIndicatrix(
            semi_major=float(k),
            semi_minor=float(k),
            orientation_rad=0.0,
            area_scale=float(k * k),
            angular_distortion_rad=0.0
        )


def compute_tissot_indicatrix(
    projection: MapProjection,
    lon_rad: float,
    lat_rad: float,
    delta: float = 1e-5
) -> TissotIndicatrix:
    """Compute Tissot's indicatrix numerically.

    The partial derivatives of the forward projection are estimated with
    central differences and turned into the axes of the distortion ellipse
    following Snyder (1987) eqs. 4-9 to 4-15. Works for any projection.

    Parameters
    ----------
    projection : MapProjection
        The projection to analyze. Its forward formulas are used regardless
        of its direction.
    lon_rad, lat_rad : float
        Location in geodetic coordinates (radians).
    delta : float
        Small angular offset for numerical differentiation.

    Returns
    -------
    TissotIndicatrix
        Local distortion characteristics.
    """
    forward = projection.radians_to_meters

    # ∂x/∂λ, ∂y/∂λ (east-west)
    x_e, y_e = forward(lon_rad + delta, lat_rad)
    x_w, y_w = forward(lon_rad - delta, lat_rad)
    dxdl = (x_e - x_w) / (2 * delta)
    dydl = (y_e - y_w) / (2 * delta)

    # ∂x/∂φ, ∂y/∂φ (north-south)
    x_n, y_n = forward(lon_rad, lat_rad + delta)
    x_s, y_s = forward(lon_rad, lat_rad - delta)
    dxdp = (x_n - x_s) / (2 * delta)
    dydp = (y_n - y_s) / (2 * delta)

    M = radius_of_curvature_meridian(lat_rad, projection.ellipsoid)
    N = radius_of_curvature_prime_vertical(lat_rad, projection.ellipsoid)
    parallel_radius = N * np.cos(lat_rad)

    # Scale along meridian (h) and parallel (k)
    h = np.sqrt(dxdp**2 + dydp**2) / M
    k = np.sqrt(dxdl**2 + dydl**2) / parallel_radius

    # Sine of the angle at which meridian and parallel intersect on the map
    sin_theta = np.abs(dxdp * dydl - dydp * dxdl) / (M * parallel_radius * h * k)
    sin_theta = np.clip(sin_theta, -1, 1)

    a_plus_b = np.sqrt(h**2 + k**2 + 2 * h * k * sin_theta)
    a_minus_b = np.sqrt(max(h**2 + k**2 - 2 * h * k * sin_theta, 0.0))
    a_axis = (a_plus_b + a_minus_b) / 2
    b_axis = (a_plus_b - a_minus_b) / 2

    # Orientation of principal direction
    theta = 0.5 * np.arctan2(2 * (dxdp * dxdl + dydp * dydl),
                             dxdp**2 + dydp**2 - dxdl**2 - dydl**2)

    return TissotIndicatrix(
        semi_major=float(a_axis),
        semi_minor=float(b_axis),
        orientation_rad=float(theta),
        area_scale=float(h * k * sin_theta),
        angular_distortion_rad=float(2 * np.arcsin(a_minus_b / a_plus_b))
    )
