"""Detection of unclean shutdowns and restoring of auto-saved workbooks."""

from __future__ import annotations

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

SESSION_FILE = "session.lock"
AUTOSAVE_PATTERN = "autosave_*.opensheet"


def _default_recovery_dir() -> Path:
    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
    return base / "OpenSheet" / "temp"


class CrashRecovery:
    """Tracks a session lock file and offers the newest auto-save after a crash."""

    def __init__(self, recovery_dir=None) -> None:
        self.recovery_dir = Path(recovery_dir) if recovery_dir else _default_recovery_dir()
        self.session_file = self.recovery_dir / SESSION_FILE
        self.recovery_file: Optional[Path] = None
        self.recovery_dir.mkdir(parents=True, exist_ok=True)

    def check_and_restore(
        self, confirm: Optional[Callable[[Path], bool]] = None
    ) -> Optional[Path]:
        """Return the auto-save to restore if the last session did not exit cleanly.

        ``confirm`` is asked with the candidate path; without it the candidate is
        accepted. A declined candidate is deleted. The session is marked dirty in
        every case.
        """
        try:
            if not self.session_file.exists():
                return None
            saves = sorted(
                (p for p in self.recovery_dir.glob(AUTOSAVE_PATTERN) if p.is_file()),
                key=lambda p: p.stat().st_mtime,
                reverse=True,
            )
            if not saves:
                return None
            candidate = saves[0]
            if confirm is None or confirm(candidate):
                self.recovery_file = candidate
                return candidate
            candidate.unlink(missing_ok=True)
            return None
        finally:
            self.mark_dirty()

    def mark_clean(self) -> None:
        """Remove the session lock, recording a clean exit."""
        self.session_file.unlink(missing_ok=True)

    def mark_dirty(self) -> None:
        """Write the session lock with the current UTC time."""
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        try:
            self.session_file.write_text(stamp, encoding="utf-8")
        except OSError:
            pass

    def recovery_file_path(self) -> Path:
        """Path for a new auto-save named after the current local time."""
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return self.recovery_dir / f"autosave_{stamp}.opensheet"