from __future__ import annotations

import threading
from typing import Callable

from .model import SystemSettings


class SettingsStore:
    """Holds the current SystemSettings snapshot.

    Readers get the snapshot reference; writers swap in a complete new
    instance under a lock, so nobody ever observes a half-applied update.
    """

    def __init__(self, initial: SystemSettings | None = None):
        self._current = initial or SystemSettings()
        self._lock = threading.Lock()

    def get(self) -> SystemSettings:
        return self._current

    def replace(self, new_settings: SystemSettings) -> SystemSettings:
        with self._lock:
            self._current = new_settings
        return new_settings

    def update(self, change: Callable[[SystemSettings], SystemSettings]) -> SystemSettings:
        with self._lock:
            self._current = change(self._current)
            return self._current
