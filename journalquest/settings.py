"""Application settings with JSON persistence.

Settings are stored at:
    ~/.local/share/JournalQuest/settings.json

Usage::

    settings = load_settings()
    settings.log_level = "DEBUG"
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)


APP_DATA_DIR = Path.home() / ".local" / "share" / "JournalQuest"
SETTINGS_PATH = APP_DATA_DIR / "settings.json"
DB_PATH = APP_DATA_DIR / "journalquest.db"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── storage ───────────────────────────────────────────────────────
    database_url: str | None = None        # None → SQLite file in APP_DATA_DIR
    persist_enabled: bool = True

    # ── progression ───────────────────────────────────────────────────
    check_streak_on_start: bool = True

    # ── logging ───────────────────────────────────────────────────────
    log_level: str = "INFO"

    def resolved_database_url(self) -> str:
        return self.database_url or f"sqlite:///{DB_PATH}"


def load_settings(path: Path = SETTINGS_PATH) -> Settings:
    """Load settings from disk, falling back to defaults."""
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        # Only use keys that exist in the dataclass
        valid_keys = {f.name for f in fields(Settings)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Unreadable settings at %s, using defaults: %s", path, exc)
        return Settings()


def save_settings(settings: Settings, path: Path = SETTINGS_PATH) -> None:
    """Write settings to disk as JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
