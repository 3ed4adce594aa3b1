import pytest

from fakes import InMemoryLocations
from src.geo_attendance.geo_attendance.core.enums import GeolocationFailure, Role
from src.geo_attendance.geo_attendance.core.exceptions import AuthorizationError, GeolocationError, ValidationError
from src.geo_attendance.geo_attendance.locations.geofence import find_matching_location, haversine_distance_m
from src.geo_attendance.geo_attendance.locations.geolocation import parse_position
from src.geo_attendance.geo_attendance.locations.model import ApprovedLocation, Coordinate
from src.geo_attendance.geo_attendance.locations.service import LocationService

OFFICE = ApprovedLocation(location_id=1, name="Head Office", latitude=24.7136, longitude=46.6753, radius_m=500)


def test_haversine_zero_distance():
    assert haversine_distance_m(24.7136, 46.6753, 24.7136, 46.6753) == 0


def test_haversine_one_degree_of_latitude():
    assert haversine_distance_m(0, 0, 1, 0) == pytest.approx(111_195, rel=1e-3)


def test_point_300m_away_is_inside():
    # 0.0027 deg of latitude is ~300 m
    point = Coordinate(24.7136 + 0.0027, 46.6753)

    assert find_matching_location(point, [OFFICE]) == OFFICE


def test_point_600m_away_is_outside():
    point = Coordinate(24.7136 + 0.0054, 46.6753)

    assert find_matching_location(point, [OFFICE]) is None


def test_boundary_is_inclusive():
    point = Coordinate(24.7136 + 0.0027, 46.6753)
    distance = haversine_distance_m(point.latitude, point.longitude, OFFICE.latitude, OFFICE.longitude)
    exact = ApprovedLocation(2, "Exact", OFFICE.latitude, OFFICE.longitude, distance)

    assert find_matching_location(point, [exact]) == exact


def test_overlapping_sites_resolve_to_first_in_order():
    annex = ApprovedLocation(location_id=2, name="Annex", latitude=24.7137, longitude=46.6754, radius_m=500)
    point = Coordinate(24.7136, 46.6753)

    assert find_matching_location(point, [OFFICE, annex]).location_id == 1
    assert find_matching_location(point, [annex, OFFICE]).location_id == 2


def test_no_sites_means_no_match():
    assert find_matching_location(Coordinate(0, 0), []) is None


@pytest.mark.parametrize(
    "raw, failure",
    [
        ("permission_denied", GeolocationFailure.PERMISSION_DENIED),
        ("TIMEOUT", GeolocationFailure.TIMEOUT),
        ("position_unavailable", GeolocationFailure.POSITION_UNAVAILABLE),
        ("something_else", GeolocationFailure.POSITION_UNAVAILABLE),
    ],
)
def test_client_geolocation_failures_are_distinguished(raw, failure):
    with pytest.raises(GeolocationError) as exc_info:
        parse_position({"error": raw})

    assert exc_info.value.failure == failure


def test_position_requires_both_coordinates():
    with pytest.raises(ValidationError):
        parse_position({"latitude": 24.7})


def test_position_rejects_out_of_range_latitude():
    with pytest.raises(ValidationError):
        parse_position({"latitude": 91, "longitude": 46.6})


def test_position_parses_strings():
    assert parse_position({"latitude": "24.5", "longitude": "46.25"}) == Coordinate(24.5, 46.25)


def test_location_service_crud_is_admin_only():
    service = LocationService(InMemoryLocations())

    with pytest.raises(AuthorizationError):
        service.create_location(current_role=Role.EMPLOYEE, name="X", latitude=1, longitude=1, radius=100)

    created = service.create_location(current_role=Role.ADMIN, name="Branch", latitude=21.5, longitude=39.2, radius=250)
    assert created.radius_m == 250
    assert service.resolve(Coordinate(21.5, 39.2)) == created


def test_location_service_rejects_non_positive_radius():
    service = LocationService(InMemoryLocations())

    with pytest.raises(ValidationError):
        service.create_location(current_role=Role.ADMIN, name="Branch", latitude=21.5, longitude=39.2, radius=0)
