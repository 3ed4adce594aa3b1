from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_latitude, require_longitude, require_non_empty, require_positive_int
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from .geofence import find_matching_location
from .model import ApprovedLocation, Coordinate
from .repository import LocationRepository

logger = logging.getLogger(__name__)


class LocationService:
    """Use case: manage approved work sites (admin) and resolve a coordinate to one."""

    def __init__(self, locations: LocationRepository):
        self._locations = locations

    def list_locations(self) -> Sequence[ApprovedLocation]:
        return self._locations.list_all()

    def resolve(self, point: Coordinate) -> Optional[ApprovedLocation]:
        return find_matching_location(point, self._locations.list_all())

    def create_location(self, *, current_role: Role, name: str, latitude, longitude, radius) -> ApprovedLocation:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")

        name = require_non_empty(name, "Location name")
        lat = require_latitude(latitude)
        lon = require_longitude(longitude)
        radius_m = require_positive_int(radius, "radius")

        location_id = self._locations.create(name=name, latitude=lat, longitude=lon, radius_m=radius_m)
        logger.info("Approved location %s created (%s, radius=%sm)", location_id, name, radius_m)
        return ApprovedLocation(location_id=location_id, name=name, latitude=lat, longitude=lon, radius_m=radius_m)

    def update_location(
        self, *, current_role: Role, location_id: int, name: str, latitude, longitude, radius
    ) -> ApprovedLocation:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")

        name = require_non_empty(name, "Location name")
        lat = require_latitude(latitude)
        lon = require_longitude(longitude)
        radius_m = require_positive_int(radius, "radius")

        if not self._locations.get_by_id(int(location_id)):
            raise NotFoundError("Location not found")
        self._locations.update(location_id=int(location_id), name=name, latitude=lat, longitude=lon, radius_m=radius_m)
        return ApprovedLocation(location_id=int(location_id), name=name, latitude=lat, longitude=lon, radius_m=radius_m)

    def delete_location(self, *, current_role: Role, location_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")

        if not self._locations.delete(int(location_id)):
            raise NotFoundError("Location not found")
        logger.info("Approved location %s deleted", location_id)
