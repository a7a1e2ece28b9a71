import pytest

from geospatial.coordinate_models import EllipsoidParameters
from geospatial.projections import Mercator


@pytest.fixture
def merc_1sp():
    return Mercator({
        "central_meridian": 0.0,
        "latitude_of_origin": 0.0,
        "scale_factor": 1.0,
        "false_easting": 0.0,
        "false_northing": 0.0,
    })


@pytest.fixture
def merc_2sp():
    return Mercator({
        "central_meridian": 0.0,
        "latitude_of_origin": 0.0,
        "false_easting": 0.0,
        "false_northing": 0.0,
    })


@pytest.fixture
def sphere():
    return EllipsoidParameters.sphere(6_371_000.0)
