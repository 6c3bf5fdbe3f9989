"""Tests for geodesic distance helpers."""

import math

import pytest

from proximity_map.geo import (
    InvalidCoordinateError,
    haversine_m,
    is_inside_circle,
    validate_coordinate,
)


def test_distance_to_self_is_zero():
    assert haversine_m(40.7128, -74.006, 40.7128, -74.006) == 0.0
    assert haversine_m(-33.86, 151.2, -33.86, 151.2) == 0.0


def test_distance_is_symmetric():
    a = (48.8566, 2.3522)
    b = (51.5074, -0.1278)
    assert haversine_m(*a, *b) == pytest.approx(haversine_m(*b, *a))


def test_one_degree_of_longitude_on_equator():
    assert haversine_m(0.0, 0.0, 0.0, 1.0) == pytest.approx(111_195.0, abs=1.0)


def test_paris_to_london_is_about_344_km():
    d = haversine_m(48.8566, 2.3522, 51.5074, -0.1278)
    assert 340_000 < d < 348_000


def test_is_inside_circle_includes_boundary():
    d = haversine_m(0.0, 0.0, 0.0, 0.01)
    assert is_inside_circle(0.0, 0.01, 0.0, 0.0, d) is True
    assert is_inside_circle(0.0, 0.01, 0.0, 0.0, d - 0.01) is False


class TestValidateCoordinate:
    def test_accepts_valid_values(self):
        assert validate_coordinate(90, -180) == (90.0, -180.0)
        assert validate_coordinate("40.5", "-74.0") == (40.5, -74.0)

    @pytest.mark.parametrize(
        "lat, lon",
        [
            (90.0001, 0.0),
            (-91.0, 0.0),
            (0.0, 180.5),
            (0.0, -181.0),
            (math.nan, 0.0),
            (0.0, math.inf),
        ],
    )
    def test_rejects_out_of_range(self, lat, lon):
        with pytest.raises(InvalidCoordinateError):
            validate_coordinate(lat, lon)

    def test_rejects_non_numeric(self):
        with pytest.raises(InvalidCoordinateError):
            validate_coordinate("north", 0.0)

    def test_error_is_a_value_error(self):
        assert issubclass(InvalidCoordinateError, ValueError)
