from __future__ import annotations
import json, os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, List, Optional

from duelsim.core.logging import LEVELS, logger
from duelsim.core.paths import SETTINGS_FILENAME

@dataclass
class SettingsData:
    log_level: str = "INFO"              # DEBUG / INFO / WARN / ERROR
    debug: bool = False                  # Forces DEBUG logging regardless of log_level
    default_seed: Optional[int] = None   # Used by the CLI when neither the matchup nor --seed gives one
    max_turns: int = 100                 # Turn cap for scripted battles
    hp_bar_width: int = 20

    def normalize(self):
        if self.log_level not in LEVELS:
            self.log_level = "INFO"
        if self.default_seed is not None and (isinstance(self.default_seed, bool) or not isinstance(self.default_seed, int)):
            self.default_seed = None
        if not isinstance(self.max_turns, int) or self.max_turns <= 0:
            self.max_turns = 100
        if not isinstance(self.hp_bar_width, int) or not 5 <= self.hp_bar_width <= 60:
            self.hp_bar_width = 20

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

class Settings:
    def __init__(self, data: SettingsData, path: Path):
        self.data = data
        self.path = path
        self._listeners: List[Callable[[SettingsData], None]] = []

    @classmethod
    def _resolve_path(cls) -> Path:
        home = Path(os.path.expanduser("~"))
        if home.is_dir() and os.access(home, os.W_OK):
            return home / SETTINGS_FILENAME
        return Path.cwd() / SETTINGS_FILENAME

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        path = path or cls._resolve_path()
        if path.exists():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                # Backfill missing fields (migration safe)
                field_names = {f.name for f in fields(SettingsData)}
                data = SettingsData(**{k: v for k, v in raw.items() if k in field_names})
                data.normalize()
                logger.debug("SettingsLoaded", path=str(path))
                return cls(data, path)
            except (OSError, ValueError, TypeError, AttributeError) as e:
                logger.warn("SettingsParseFailedUsingDefaults", path=str(path), error=str(e))
        data = SettingsData()
        data.normalize()
        return cls(data, path)

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2), encoding="utf-8")
            logger.debug("SettingsSaved", path=str(self.path))
        except OSError as e:
            logger.error("SettingsSaveFailed", error=str(e))

    def apply(self):
        """Push the configured level into the shared logger."""
        logger.set_level(self.data.effective_log_level)  # type: ignore[arg-type]

    def update(self, **changes):
        for name, value in changes.items():
            if not hasattr(self.data, name):
                raise AttributeError(f"Unknown setting: {name}")
            setattr(self.data, name, value)
        self.data.normalize()
        self.apply()
        self.save()
        self._notify()

    def on_change(self, fn: Callable[[SettingsData], None]):
        self._listeners.append(fn)

    def _notify(self):
        for fn in self._listeners:
            fn(self.data)
