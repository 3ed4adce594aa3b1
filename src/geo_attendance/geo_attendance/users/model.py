from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an employee or administrator account.

    Plain data object (no DB access code). ``device_user_id`` is the
    identifier the biometric terminal assigns to this person, if enrolled.
    """

    user_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    department: Optional[str] = None
    device_user_id: Optional[str] = None
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.full_name,
            "username": self.username,
            "role": self.role.value,
            "department": self.department or "",
            "device_user_id": self.device_user_id,
            "is_active": self.is_active,
        }
