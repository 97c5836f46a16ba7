"""Persistent user settings with change notification."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Callable, Optional

MAX_RECENT_FILES = 10


def _default_settings_path() -> Path:
    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Preferences"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "OpenSheet" / "OpenSheet.json"


class SettingsManager:
    """Key/value settings stored as JSON in the user's configuration directory."""

    def __init__(self, path=None) -> None:
        self.path = Path(path) if path else _default_settings_path()
        self._values: dict[str, Any] = {}
        self._callbacks: list[Callable[[str, Any], None]] = []
        self.load()

    def load(self) -> None:
        """Read the stored settings; a missing or unreadable file gives none."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            data = {}
        self._values = data if isinstance(data, dict) else {}

    def save(self) -> None:
        """Write the settings to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp = self.path.with_name(self.path.name + ".tmp")
        temp.write_text(json.dumps(self._values, indent=2), encoding="utf-8")
        os.replace(temp, self.path)

    def value(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set_value(self, key: str, value: Any) -> None:
        """Store a value and notify every registered callback."""
        self._values[key] = value
        for callback in self._callbacks:
            callback(key, value)

    def on_setting_changed(self, callback: Callable[[str, Any], None]) -> None:
        """Register ``callback(key, value)`` to be called on every change."""
        self._callbacks.append(callback)

    @property
    def theme(self) -> str:
        return str(self.value("theme", "light"))

    @property
    def show_grid_lines(self) -> bool:
        return bool(self.value("showGridLines", True))

    @property
    def default_row_height(self) -> int:
        return int(self.value("defaultRowHeight", 22))

    @property
    def default_col_width(self) -> int:
        return int(self.value("defaultColWidth", 90))

    @property
    def autosave_interval_sec(self) -> int:
        return int(self.value("autosaveInterval", 60))

    @property
    def language(self) -> str:
        return str(self.value("language", "en-us"))

    @property
    def recent_files(self) -> list[str]:
        stored: Optional[Any] = self.value("recentFiles")
        if isinstance(stored, str):
            return [stored]
        return [str(item) for item in stored] if stored else []

    def add_recent_file(self, path) -> None:
        """Move ``path`` to the front of the recent files, keeping at most ten."""
        path = str(path)
        recent = [item for item in self.recent_files if item != path]
        recent.insert(0, path)
        self.set_value("recentFiles", recent[:MAX_RECENT_FILES])