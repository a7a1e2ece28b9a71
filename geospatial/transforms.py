"""
Mathematical Transform Abstractions.

This module provides the base classes shared by every projection:

- `MathTransform`: the generic two-dimensional transform used by an outer
  transformation pipeline. It knows how to apply itself to single points,
  lists of points and numpy arrays, and how to produce its reciprocal.
- `MapProjection`: a `MathTransform` that carries ellipsoid state and the
  projection centre, and dispatches to forward (radians -> meters) or
  inverse (meters -> radians) formulas according to its direction.

Reciprocal Caching
------------------
`MapProjection.inverse()` is a memoized getter. The first call builds the
reciprocal projection (same parameters, opposite direction) and links it
back to this instance, so ``p.inverse().inverse() is p``. The cache slot is
the only mutable state of a projection and is written under a lock so that
concurrent first calls observe a single reciprocal.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, List, Optional, Tuple
import threading

import numpy as np
from numpy.typing import ArrayLike, NDArray

from common.constants import GeodeticConstants
from common.logging_config import get_logger
from geospatial.coordinate_models import EllipsoidParameters, WGS84Ellipsoid
from geospatial.parameters import ParameterList, ParameterSource

logger = get_logger(__name__)


class ProjectionDomainError(ValueError):
    """Raised when a coordinate lies outside the domain of a projection."""


class TransformDirection(Enum):
    """Direction in which a projection instance applies its formulas."""
    FORWARD = "forward"  # geodetic radians -> projected meters
    INVERSE = "inverse"  # projected meters -> geodetic radians

    def reversed(self) -> 'TransformDirection':
        if self is TransformDirection.FORWARD:
            return TransformDirection.INVERSE
        return TransformDirection.FORWARD


class MathTransform(ABC):
    """Abstract two-dimensional coordinate transform.

    Subclasses implement `transform` for a single point and `inverse` for
    the reciprocal; batch helpers are built on top of `transform`.
    """

    @abstractmethod
    def transform(self, x: float, y: float) -> Tuple[float, float]:
        """Transform a single coordinate pair.

        Parameters
        ----------
        x, y : float
            Input ordinates (meaning depends on the transform's source space).

        Returns
        -------
        Tuple[float, float]
            Output ordinates in the target space.
        """
        pass

    @abstractmethod
    def inverse(self) -> 'MathTransform':
        """Return the reciprocal transform."""
        pass

    def transform_list(
        self,
        points: Iterable[Tuple[float, float]]
    ) -> List[Tuple[float, float]]:
        """Transform a sequence of coordinate pairs.

        Parameters
        ----------
        points : iterable of (float, float)
            Input coordinate pairs.

        Returns
        -------
        List[Tuple[float, float]]
            Transformed pairs, in input order.
        """
        return [self.transform(x, y) for x, y in points]

    def transform_array(
        self,
        xs: ArrayLike,
        ys: ArrayLike
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Transform arrays of ordinates elementwise.

        Parameters
        ----------
        xs, ys : array_like
            First and second ordinates. Must have the same shape.

        Returns
        -------
        Tuple[ndarray, ndarray]
            Transformed ordinates with the input shape.
        """
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        if xs.shape != ys.shape:
            raise ValueError(
                f"Ordinate arrays must have the same shape, got {xs.shape} and {ys.shape}"
            )

        out_x = np.empty(xs.shape, dtype=np.float64)
        out_y = np.empty(ys.shape, dtype=np.float64)
        for idx in np.ndindex(xs.shape):
            out_x[idx], out_y[idx] = self.transform(float(xs[idx]), float(ys[idx]))

        return out_x, out_y


class MapProjection(MathTransform):
    """Base class for map projections.

    Reads the ellipsoid and the projection centre once at construction.
    Angular parameters are given in decimal degrees and stored in radians.

    Parameters
    ----------
    parameters : ParameterList, iterable of ProjectionParameter, or mapping
        Named projection parameters.
    ellipsoid : EllipsoidParameters, optional
        Reference ellipsoid. If omitted, it is derived from the
        ``semi_major``/``semi_minor`` parameters when both are present,
        otherwise WGS84 is used.
    direction : TransformDirection
        Whether `transform` applies the forward or the inverse formulas.

    Notes
    -----
    ``false_easting`` and ``false_northing`` are read and exposed but not
    applied by the projection formulas. Offsetting the projected plane is
    left to the caller.
    """

    # Angular constants shared by the formulas
    PI = GeodeticConstants.PI
    HALF_PI = GeodeticConstants.HALF_PI
    EPSLN = GeodeticConstants.POLE_EPSILON.value

    def __init__(
        self,
        parameters: ParameterSource,
        ellipsoid: Optional[EllipsoidParameters] = None,
        direction: TransformDirection = TransformDirection.FORWARD
    ):
        self._parameters = ParameterList(parameters)
        if ellipsoid is None:
            ellipsoid = self._ellipsoid_from_parameters(self._parameters)
        self._ellipsoid = ellipsoid
        self._direction = direction

        self._semi_major = self._ellipsoid.a
        self._es = self._ellipsoid.e2
        self._e = self._ellipsoid.e

        self._central_meridian = float(
            np.radians(self._parameters.get_parameter_value("central_meridian", 0.0))
        )
        self._lat_origin = float(
            np.radians(self._parameters.get_parameter_value("latitude_of_origin", 0.0))
        )
        self._false_easting = self._parameters.get_parameter_value("false_easting", 0.0)
        self._false_northing = self._parameters.get_parameter_value("false_northing", 0.0)

        self._name = ""
        self._authority = GeodeticConstants.EPSG_AUTHORITY
        self._authority_code: Optional[int] = None

        self._inverse: Optional['MapProjection'] = None
        self._inverse_lock = threading.Lock()

    @staticmethod
    def _ellipsoid_from_parameters(parameters: ParameterList) -> EllipsoidParameters:
        semi_major = parameters.get_parameter("semi_major")
        semi_minor = parameters.get_parameter("semi_minor")
        if semi_major is not None and semi_minor is not None:
            return EllipsoidParameters.from_axes(semi_major, semi_minor)
        return WGS84Ellipsoid

    # ------------------------------------------------------------------
    # Descriptive properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        """Human-readable name of the projection."""
        return self._name

    @property
    def authority(self) -> str:
        """Authority that defines the projection method."""
        return self._authority

    @property
    def authority_code(self) -> Optional[int]:
        """Authority code of the projection method, if one is assigned."""
        return self._authority_code

    @property
    def parameters(self) -> ParameterList:
        return self._parameters

    @property
    def ellipsoid(self) -> EllipsoidParameters:
        return self._ellipsoid

    @property
    def semi_major(self) -> float:
        return self._semi_major

    @property
    def eccentricity(self) -> float:
        return self._e

    @property
    def eccentricity_squared(self) -> float:
        return self._es

    @property
    def central_meridian(self) -> float:
        """Longitude of the projection centre in radians."""
        return self._central_meridian

    @property
    def latitude_of_origin(self) -> float:
        """Latitude of the projection origin in radians."""
        return self._lat_origin

    @property
    def false_easting(self) -> float:
        return self._false_easting

    @property
    def false_northing(self) -> float:
        return self._false_northing

    @property
    def direction(self) -> TransformDirection:
        return self._direction

    @property
    def is_inverse(self) -> bool:
        return self._direction is TransformDirection.INVERSE

    @property
    @abstractmethod
    def proj4_string(self) -> str:
        """PROJ.4 definition of the formulas this instance applies."""
        pass

    @property
    @abstractmethod
    def preserves_angles(self) -> bool:
        """Whether this is a conformal projection."""
        pass

    @property
    @abstractmethod
    def preserves_area(self) -> bool:
        """Whether this is an equal-area projection."""
        pass

    # ------------------------------------------------------------------
    # Formulas
    # ------------------------------------------------------------------

    @abstractmethod
    def radians_to_meters(self, lon: float, lat: float) -> Tuple[float, float]:
        """Project geodetic coordinates (radians) to the plane (meters)."""
        pass

    @abstractmethod
    def meters_to_radians(self, x: float, y: float) -> Tuple[float, float]:
        """Recover geodetic coordinates (radians) from the plane (meters)."""
        pass

    def transform(self, x: float, y: float) -> Tuple[float, float]:
        if self.is_inverse:
            return self.meters_to_radians(x, y)
        return self.radians_to_meters(x, y)

    # ------------------------------------------------------------------
    # Reciprocal
    # ------------------------------------------------------------------

    def inverse(self) -> 'MapProjection':
        """Return the reciprocal projection, creating it on first use.

        This is the only method that mutates a projection: the reciprocal is
        cached, linked back to this instance, and returned unchanged by every
        later call.
        """
        if self._inverse is None:
            with self._inverse_lock:
                if self._inverse is None:
                    self._inverse = self._create_inverse()
        return self._inverse

    def _create_inverse(self) -> 'MapProjection':
        mirror = type(self)(
            self._parameters,
            ellipsoid=self._ellipsoid,
            direction=self._direction.reversed()
        )
        # Linked before publication so the mirror never builds a third instance
        mirror._inverse = self
        logger.debug(
            f"Created {mirror.direction.value} {mirror.name} reciprocal "
            f"for {self._direction.value} instance"
        )
        return mirror

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self._name!r}, "
            f"direction={self._direction.value}, ellipsoid={self._ellipsoid.name})"
        )
