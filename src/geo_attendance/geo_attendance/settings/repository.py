from __future__ import annotations

from typing import Optional, Protocol

from .model import SystemSettings


class SettingsRepository(Protocol):
    def load(self) -> Optional[SystemSettings]:
        """Return persisted settings, or None if nothing was saved yet."""

        raise NotImplementedError

    def save(self, settings: SystemSettings) -> None:
        raise NotImplementedError
