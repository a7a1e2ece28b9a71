"""
Consistency Checks for Map Projections.

This module provides checks that verify a projection behaves as the
mathematics requires, independently of any particular caller.

Check Categories
----------------
1. Invertibility (forward then inverse recovers the input)
2. Input policy (NaN propagation, pole rejection)
3. Reciprocal identity (inverse of the inverse is the original object)
4. Conformality (Tissot indicatrix is a circle)
5. Agreement with PROJ (reference implementation via pyproj)
"""

from dataclasses import dataclass
from typing import Any, Dict, List
import numpy as np
from numpy.typing import ArrayLike

from pyproj import Transformer
from pyproj.exceptions import CRSError, ProjError

from common.logging_config import get_logger
from geospatial.projections import compute_tissot_indicatrix
from geospatial.transforms import MapProjection, ProjectionDomainError

logger = get_logger(__name__)


@dataclass
class ValidationResult:
    """Result of a validation check.

    Attributes
    ----------
    test_name : str
        Name of the check.
    passed : bool
        Whether the check passed.
    message : str
        Description of result.
    details : dict
        Additional details.
    """
    test_name: str
    passed: bool
    message: str
    details: Dict[str, Any]


class ProjectionConsistencyChecker:
    """Checker for the mathematical consistency of a projection.

    All checks exercise the forward (`radians_to_meters`) and inverse
    (`meters_to_radians`) formulas directly, so they apply equally to
    forward and inverse instances.
    """

    def __init__(
        self,
        strict_mode: bool = False,
        log_violations: bool = True
    ):
        """Initialize projection checker.

        Parameters
        ----------
        strict_mode : bool
            If True, raise AssertionError on a failed check.
        log_violations : bool
            Whether to log failed checks.
        """
        self.strict_mode = strict_mode
        self.log_violations = log_violations
        self._logger = get_logger("ProjectionConsistencyChecker")

    def check_all(
        self,
        projection: MapProjection,
        lons_rad: ArrayLike,
        lats_rad: ArrayLike
    ) -> List[ValidationResult]:
        """Run every check on a projection.

        Parameters
        ----------
        projection : MapProjection
            Projection under test.
        lons_rad, lats_rad : array_like
            Sample locations in radians, away from the poles.

        Returns
        -------
        List[ValidationResult]
            Results of all checks.
        """
        return [
            self.check_round_trip(projection, lons_rad, lats_rad),
            self.check_nan_propagation(projection),
            self.check_pole_guard(projection),
            self.check_reciprocal_identity(projection),
            self.check_conformality(projection, lons_rad, lats_rad),
            self.check_against_proj(projection, lons_rad, lats_rad),
        ]

    def _report(self, result: ValidationResult) -> ValidationResult:
        if not result.passed:
            if self.log_violations:
                self._logger.warning(f"CHECK FAILED | {result.test_name} | {result.message}")
            if self.strict_mode:
                raise AssertionError(f"{result.test_name}: {result.message}")
        else:
            self._logger.debug(f"CHECK PASSED | {result.test_name} | {result.message}")
        return result

    def check_round_trip(
        self,
        projection: MapProjection,
        lons_rad: ArrayLike,
        lats_rad: ArrayLike,
        tolerance: float = 1e-9
    ) -> ValidationResult:
        """Check that inverse(forward(p)) recovers p within tolerance (radians)."""
        lons = np.asarray(lons_rad, dtype=np.float64).reshape(-1)
        lats = np.asarray(lats_rad, dtype=np.float64).reshape(-1)

        errors = []
        for lon, lat in zip(lons, lats):
            x, y = projection.radians_to_meters(lon, lat)
            lon2, lat2 = projection.meters_to_radians(x, y)
            errors.append(max(abs(lon2 - lon), abs(lat2 - lat)))

        max_error = float(np.max(errors)) if errors else 0.0

        return self._report(ValidationResult(
            test_name="round_trip",
            passed=max_error <= tolerance,
            message=f"Round trip check: max error {max_error:.3e} rad",
            details={
                'max_error_rad': max_error,
                'tolerance_rad': tolerance,
                'num_points': len(errors),
            }
        ))

    def check_nan_propagation(self, projection: MapProjection) -> ValidationResult:
        """Check that NaN input to the forward formulas yields NaN output."""
        outputs = [
            projection.radians_to_meters(np.nan, 0.5),
            projection.radians_to_meters(0.5, np.nan),
            projection.radians_to_meters(np.nan, np.nan),
        ]
        passed = all(np.isnan(x) and np.isnan(y) for x, y in outputs)

        return self._report(ValidationResult(
            test_name="nan_propagation",
            passed=passed,
            message="NaN propagation check: " + ("ok" if passed else "finite output for NaN input"),
            details={'outputs': outputs}
        ))

    def check_pole_guard(self, projection: MapProjection) -> ValidationResult:
        """Check that the forward formulas reject latitudes at the poles."""
        rejected = 0
        for lat in (projection.HALF_PI, -projection.HALF_PI):
            try:
                projection.radians_to_meters(0.0, lat)
            except ProjectionDomainError:
                rejected += 1

        return self._report(ValidationResult(
            test_name="pole_guard",
            passed=rejected == 2,
            message=f"Pole guard check: {rejected}/2 poles rejected",
            details={'rejected': rejected}
        ))

    def check_reciprocal_identity(self, projection: MapProjection) -> ValidationResult:
        """Check that the cached reciprocal links back to the original."""
        reciprocal = projection.inverse()
        passed = (
            reciprocal is projection.inverse()
            and reciprocal.inverse() is projection
            and reciprocal.direction is projection.direction.reversed()
        )

        return self._report(ValidationResult(
            test_name="reciprocal_identity",
            passed=passed,
            message="Reciprocal identity check: " + ("ok" if passed else "reciprocal not linked"),
            details={'reciprocal': repr(reciprocal)}
        ))

    def check_conformality(
        self,
        projection: MapProjection,
        lons_rad: ArrayLike,
        lats_rad: ArrayLike
    ) -> ValidationResult:
        """Check that the numerical Tissot indicatrix matches the declared conformality."""
        lons = np.asarray(lons_rad, dtype=np.float64).reshape(-1)
        lats = np.asarray(lats_rad, dtype=np.float64).reshape(-1)

        indicatrices = [
            compute_tissot_indicatrix(projection, lon, lat)
            for lon, lat in zip(lons, lats)
        ]
        conformal = [t.is_conformal for t in indicatrices]
        passed = all(c == projection.preserves_angles for c in conformal)
        max_distortion = max((t.angular_distortion_rad for t in indicatrices), default=0.0)

        return self._report(ValidationResult(
            test_name="conformality",
            passed=passed,
            message=f"Conformality check: max angular distortion {max_distortion:.3e} rad",
            details={
                'max_angular_distortion_rad': float(max_distortion),
                'preserves_angles': projection.preserves_angles,
            }
        ))

    def check_against_proj(
        self,
        projection: MapProjection,
        lons_rad: ArrayLike,
        lats_rad: ArrayLike,
        tolerance_m: float = 1e-3
    ) -> ValidationResult:
        """Compare the forward formulas against PROJ on the same ellipsoid.

        Longitudes should stay within 180° of the central meridian, since
        PROJ wraps longitude differences and the projection does not.
        """
        lons = np.asarray(lons_rad, dtype=np.float64).reshape(-1)
        lats = np.asarray(lats_rad, dtype=np.float64).reshape(-1)

        try:
            projected = projection.to_crs()
            to_proj = Transformer.from_crs(projected.geodetic_crs, projected, always_xy=True)
        except (CRSError, ProjError) as err:
            # PROJ rejects parameters such as k_0 <= 0
            return self._report(ValidationResult(
                test_name="proj_agreement",
                passed=False,
                message=f"PROJ agreement check: {err}",
                details={'error': str(err), 'proj4': projection.proj4_string}
            ))

        ref_x, ref_y = to_proj.transform(np.degrees(lons), np.degrees(lats))
        ours = [projection.radians_to_meters(lon, lat) for lon, lat in zip(lons, lats)]
        our_x = np.array([p[0] for p in ours])
        our_y = np.array([p[1] for p in ours])

        deviation = np.hypot(our_x - np.asarray(ref_x), our_y - np.asarray(ref_y))
        max_deviation = float(np.max(deviation)) if deviation.size else 0.0

        return self._report(ValidationResult(
            test_name="proj_agreement",
            passed=max_deviation <= tolerance_m,
            message=f"PROJ agreement check: max deviation {max_deviation:.3e} m",
            details={
                'max_deviation_m': max_deviation,
                'tolerance_m': tolerance_m,
                'proj4': projection.proj4_string,
            }
        ))
