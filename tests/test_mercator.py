import logging
import warnings

import numpy as np
import pytest

from geospatial.coordinate_models import EllipsoidParameters
from geospatial.projections import Mercator, MercatorMode, compute_tissot_indicatrix
from geospatial.transforms import MapProjection, ProjectionDomainError, TransformDirection

HALF_PI = np.pi / 2
EPSLN = MapProjection.EPSLN


def test_one_standard_parallel_mode(merc_1sp):
    assert merc_1sp.mode is MercatorMode.ONE_STANDARD_PARALLEL
    assert merc_1sp.name == "Mercator_1SP"
    assert merc_1sp.scale_at_origin == 1.0
    assert merc_1sp.authority == "EPSG"
    assert merc_1sp.authority_code is None


def test_two_standard_parallel_mode(merc_2sp):
    assert merc_2sp.mode is MercatorMode.TWO_STANDARD_PARALLEL
    assert merc_2sp.name == "Mercator_2SP"
    assert merc_2sp.authority == "EPSG"
    assert merc_2sp.authority_code == 9805
    assert merc_2sp.scale_at_origin == 1.0


def test_two_standard_parallel_scale_from_latitude():
    # EPSG guidance note 7-2, Mercator (variant B) example
    krassowsky = EllipsoidParameters(a=6378245.0, f=1 / 298.3, name="Krassowsky 1940")
    merc = Mercator({"latitude_of_origin": 42.0, "central_meridian": 51.0}, ellipsoid=krassowsky)

    assert merc.scale_at_origin == pytest.approx(0.744260894, abs=1e-9)

    x, y = merc.transform(np.radians(53.0), np.radians(53.0))
    assert x == pytest.approx(165704.29, abs=0.05)
    assert y == pytest.approx(5171848.07, abs=0.05)


def test_one_standard_parallel_reference_point():
    # EPSG guidance note 7-2, Mercator (variant A) example without false origin
    bessel = EllipsoidParameters(a=6377397.155, f=1 / 299.15281, name="Bessel 1841")
    merc = Mercator(
        {
            "central_meridian": 110.0,
            "latitude_of_origin": 0.0,
            "scale_factor": 0.997,
            "false_easting": 3900000.0,
            "false_northing": 900000.0,
        },
        ellipsoid=bessel,
    )

    x, y = merc.transform(np.radians(120.0), np.radians(-3.0))
    assert x + merc.false_easting == pytest.approx(5009726.58, abs=0.05)
    assert y + merc.false_northing == pytest.approx(569150.82, abs=0.05)


def test_forward_wgs84_scenario(merc_1sp):
    x, y = merc_1sp.transform(np.radians(10.0), np.radians(45.0))

    assert x == pytest.approx(1113194.9, abs=1.0)
    assert y == pytest.approx(5591295.9, abs=1.0)


def test_false_origin_is_not_applied():
    shifted = Mercator({"scale_factor": 1.0, "false_easting": 500000.0, "false_northing": 1e6})
    plain = Mercator({"scale_factor": 1.0})

    point = (np.radians(-20.0), np.radians(33.0))
    assert shifted.transform(*point) == plain.transform(*point)
    assert shifted.false_easting == 500000.0
    assert shifted.false_northing == 1e6


@pytest.mark.parametrize(
    ["lon", "lat"],
    [(np.nan, 0.5), (0.5, np.nan), (np.nan, np.nan), (np.nan, HALF_PI)],
)
def test_forward_nan_propagation(merc_1sp, lon, lat):
    x, y = merc_1sp.radians_to_meters(lon, lat)

    assert np.isnan(x)
    assert np.isnan(y)


@pytest.mark.parametrize("sign", [1, -1])
@pytest.mark.parametrize("lon", [0.0, 1.0, -3.0])
def test_pole_guard(merc_1sp, sign, lon):
    with pytest.raises(ProjectionDomainError, match="poles"):
        merc_1sp.radians_to_meters(lon, sign * (HALF_PI - EPSLN / 2))

    x, y = merc_1sp.radians_to_meters(lon, sign * (HALF_PI - 2 * EPSLN))
    assert np.isfinite(x)
    assert np.isfinite(y)
    assert np.sign(y) == sign


def test_pole_error_is_value_error(merc_2sp):
    with pytest.raises(ValueError):
        merc_2sp.transform(0.0, -HALF_PI)


@pytest.mark.parametrize("central_meridian", [0.0, -75.0, 135.0])
@pytest.mark.parametrize("scale_factor", [1.0, 0.9996, None])
def test_round_trip(central_meridian, scale_factor):
    params = {"central_meridian": central_meridian, "latitude_of_origin": 20.0}
    if scale_factor is not None:
        params["scale_factor"] = scale_factor
    merc = Mercator(params)

    lats = np.radians([-85.0, -60.0, -45.0, -1.0, 0.0, 0.5, 30.0, 60.0, 85.0])
    lons = np.radians(central_meridian + np.array([-170.0, -90.0, -10.0, 0.0, 1.0, 10.0, 45.0, 120.0, 179.0]))

    for lon, lat in zip(lons, lats):
        x, y = merc.radians_to_meters(lon, lat)
        lon2, lat2 = merc.meters_to_radians(x, y)
        assert lon2 == pytest.approx(lon, abs=1e-9)
        assert lat2 == pytest.approx(lat, abs=1e-9)


def test_sphere_has_closed_form(sphere):
    merc = Mercator({"scale_factor": 1.0}, ellipsoid=sphere)
    lat = np.radians(60.0)

    _, y = merc.radians_to_meters(0.0, lat)
    assert y == pytest.approx(sphere.a * np.log(np.tan(np.pi / 4 + lat / 2)), rel=1e-12)

    _, lat2 = merc.meters_to_radians(0.0, y)
    assert lat2 == pytest.approx(lat, abs=1e-12)


def test_latitude_beyond_pole_gives_nan(merc_1sp):
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        x, y = merc_1sp.radians_to_meters(0.0, 2.0)

    assert np.isfinite(x)
    assert np.isnan(y)


def test_inverse_has_no_guards(merc_1sp):
    lon, lat = merc_1sp.meters_to_radians(0.0, 1e12)
    assert lat == pytest.approx(HALF_PI, abs=1e-9)
    assert lon == 0.0

    _, lat = merc_1sp.meters_to_radians(0.0, -1e12)
    assert lat == pytest.approx(-HALF_PI, abs=1e-9)

    lon, lat = merc_1sp.meters_to_radians(np.nan, np.nan)
    assert np.isnan(lon)
    assert np.isnan(lat)


def test_zero_scale_factor_is_accepted(caplog):
    with caplog.at_level(logging.WARNING, logger="geospatial.projections"):
        merc = Mercator({"scale_factor": 0.0})

    assert "not positive" in caplog.text
    assert merc.scale_at_origin == 0.0
    assert merc.radians_to_meters(0.5, 0.5) == (0.0, 0.0)

    lon, _ = merc.meters_to_radians(1.0, 1.0)
    assert np.isinf(lon)


def test_negative_scale_factor_mirrors_plane():
    mirrored = Mercator({"scale_factor": -1.0})
    plain = Mercator({"scale_factor": 1.0})
    point = (np.radians(12.0), np.radians(-40.0))

    x, y = mirrored.radians_to_meters(*point)
    x_ref, y_ref = plain.radians_to_meters(*point)
    assert (x, y) == pytest.approx((-x_ref, -y_ref))

    np.testing.assert_allclose(mirrored.meters_to_radians(x, y), point, atol=1e-9)


def test_reciprocal_is_cached(merc_1sp):
    reciprocal = merc_1sp.inverse()

    assert merc_1sp.inverse() is reciprocal
    assert reciprocal.inverse() is merc_1sp
    assert reciprocal.inverse().inverse() is reciprocal


def test_reciprocal_applies_inverse_formulas(merc_2sp):
    reciprocal = merc_2sp.inverse()

    assert reciprocal.direction is TransformDirection.INVERSE
    assert reciprocal.is_inverse
    assert reciprocal.name == merc_2sp.name
    assert reciprocal.authority_code == merc_2sp.authority_code
    assert reciprocal.scale_at_origin == merc_2sp.scale_at_origin
    assert reciprocal.ellipsoid is merc_2sp.ellipsoid

    lon, lat = np.radians(-47.5), np.radians(-22.9)
    x, y = merc_2sp.transform(lon, lat)
    assert reciprocal.transform(x, y) == pytest.approx((lon, lat), abs=1e-9)


def test_reciprocal_of_inverse_instance():
    inverse_first = Mercator({"scale_factor": 1.0}, direction=TransformDirection.INVERSE)
    forward = inverse_first.inverse()

    assert forward.direction is TransformDirection.FORWARD
    assert forward.inverse() is inverse_first


def test_proj4_string(merc_1sp, merc_2sp):
    assert "+proj=merc" in merc_1sp.proj4_string
    assert "+k_0=1" in merc_1sp.proj4_string
    assert "+lat_ts=0" in merc_2sp.proj4_string
    assert "+x_0=0 +y_0=0" in merc_2sp.proj4_string


@pytest.mark.parametrize("scale_factor", [1.0, None])
def test_matches_pyproj(scale_factor):
    from pyproj import Transformer

    params = {"central_meridian": 30.0, "latitude_of_origin": 35.0}
    if scale_factor is not None:
        params["scale_factor"] = scale_factor
    merc = Mercator(params)

    crs = merc.to_crs()
    to_proj = Transformer.from_crs(crs.geodetic_crs, crs, always_xy=True)

    for lon_deg, lat_deg in [(30.0, 0.0), (12.5, 55.0), (100.0, -70.0), (-60.0, 10.0)]:
        expected = to_proj.transform(lon_deg, lat_deg)
        actual = merc.radians_to_meters(np.radians(lon_deg), np.radians(lat_deg))
        np.testing.assert_allclose(actual, expected, atol=1e-3)


@pytest.mark.parametrize("lat_deg", [0.0, 30.0, -45.0, 60.0, 80.0])
def test_distortion(merc_1sp, lat_deg):
    lat = np.radians(lat_deg)
    analytic = merc_1sp.compute_distortion(0.3, lat)
    numeric = compute_tissot_indicatrix(merc_1sp, 0.3, lat)

    assert analytic.is_conformal
    assert numeric.is_conformal
    assert numeric.semi_major == pytest.approx(analytic.semi_major, rel=1e-6)
    assert numeric.area_scale == pytest.approx(analytic.area_scale, rel=1e-6)
    assert numeric.angular_distortion_rad == pytest.approx(0.0, abs=1e-6)


def test_distortion_on_sphere(sphere):
    merc = Mercator({"scale_factor": 1.0}, ellipsoid=sphere)
    indicatrix = merc.compute_distortion(0.0, np.radians(60.0))

    assert indicatrix.semi_major == pytest.approx(2.0)
    assert not indicatrix.is_equal_area
    assert merc.preserves_angles
    assert not merc.preserves_area
