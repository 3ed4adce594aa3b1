from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ApprovedLocation


class LocationRepository(Protocol):
    def list_all(self) -> Sequence[ApprovedLocation]:
        """All approved locations ordered by id ascending."""

        raise NotImplementedError

    def get_by_id(self, location_id: int) -> Optional[ApprovedLocation]:
        raise NotImplementedError

    def create(self, *, name: str, latitude: float, longitude: float, radius_m: int) -> int:
        raise NotImplementedError

    def update(self, *, location_id: int, name: str, latitude: float, longitude: float, radius_m: int) -> bool:
        raise NotImplementedError

    def delete(self, location_id: int) -> bool:
        raise NotImplementedError
