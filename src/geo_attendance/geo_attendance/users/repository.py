from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_device_user_id(self, device_user_id: str) -> Optional[User]:
        raise NotImplementedError

    def list_employees(self) -> Sequence[User]:
        """Active employees ordered by id."""

        raise NotImplementedError

    def list_admins(self) -> Sequence[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        full_name: str,
        username: str,
        password_hash: str,
        role: Role,
        department: Optional[str],
        device_user_id: Optional[str] = None,
    ) -> int:
        raise NotImplementedError
