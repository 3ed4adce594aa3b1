from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ApprovedLocation:
    """Domain entity: an admin-registered work site (circular geofence)."""

    location_id: int
    name: str
    latitude: float
    longitude: float
    radius_m: int

    def to_dict(self) -> dict:
        return {
            "id": self.location_id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "radius": self.radius_m,
        }


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float
