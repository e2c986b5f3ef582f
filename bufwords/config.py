"""Configuration management — JSON-based, stored in ~/.config/bufwords/."""
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "skip_blank": False,  # drop whitespace / line break tokens from the completion list
    "debug_logging": False,
}

CONFIG_DIR = Path.home() / ".config" / "bufwords"
CONFIG_FILE = CONFIG_DIR / "config.json"

# Key under which editors send our settings in workspace/didChangeConfiguration
SETTINGS_SECTION = "bufwords"


class Config:
    def __init__(self, load: bool = True):
        self._data = dict(DEFAULT_CONFIG)
        if load:
            self.load()

    def load(self):
        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE, "r") as f:
                    stored = json.load(f)
                self.update(stored)
            except (json.JSONDecodeError, IOError) as e:
                logger.warning("Ignoring unreadable config %s: %s", CONFIG_FILE, e)

    def update(self, values):
        """Merge known keys from values, keeping the current value for invalid entries."""
        if not isinstance(values, dict):
            logger.warning("Ignoring non-object settings: %r", values)
            return
        for key, value in values.items():
            if key not in DEFAULT_CONFIG:
                logger.debug("Ignoring unknown setting %r", key)
                continue
            if not isinstance(value, bool):
                logger.warning("Invalid value for %s: %r, keeping %r", key, value, self._data[key])
                continue
            self._data[key] = value

    def apply_settings(self, settings):
        """Apply editor settings; accepts either {"bufwords": {...}} or the section itself."""
        if isinstance(settings, dict) and isinstance(settings.get(SETTINGS_SECTION), dict):
            settings = settings[SETTINGS_SECTION]
        self.update(settings)

    @property
    def skip_blank(self):
        return self._data["skip_blank"]

    @property
    def debug_logging(self):
        return self._data["debug_logging"]
