"""Geofence evaluation over approved work sites.

Distances use the haversine great-circle formula on a spherical Earth
(mean radius 6,371 km). A coordinate matches a site when its distance is
less than or equal to the site's radius.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

from ..core.constants import EARTH_RADIUS_METERS
from .model import ApprovedLocation, Coordinate


def haversine_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2.0) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def distance_to(point: Coordinate, location: ApprovedLocation) -> float:
    return haversine_distance_m(point.latitude, point.longitude, location.latitude, location.longitude)


def find_matching_location(point: Coordinate, locations: Iterable[ApprovedLocation]) -> Optional[ApprovedLocation]:
    """Return the first location (in the given order) containing ``point``.

    Overlapping sites resolve to whichever comes first, so callers wanting a
    stable answer must pass a stable ordering. ``None`` means the point is not
    at any registered site; that is a business outcome, not an error.
    """

    for location in locations:
        if distance_to(point, location) <= location.radius_m:
            return location
    return None
