# src/treelox/config.py
"""
Persistent user configuration.

Settings live in ``~/.treelox/config.json`` (or the file named by
``TREELOX_CONFIG``). ``TREELOX_DEBUG`` and ``TREELOX_GC_STRESS`` override
the stored values for a single process.
"""

import json
import os
from pathlib import Path

DEBUG_LEVELS = ("none", "minimal", "normal", "verbose")

DEFAULTS = {
    "debug_level": "none",
    "gc_initial_threshold": 256,
    "gc_growth_factor": 2.0,
    "gc_stress": False,
    "max_call_depth": 2000,
}


def _config_path():
    override = os.environ.get("TREELOX_CONFIG")
    if override:
        return Path(override)
    return Path.home() / ".treelox" / "config.json"


def _coerce(key, value):
    """Convert ``value`` (possibly a CLI string) to the type ``key`` expects."""
    if key not in DEFAULTS:
        raise KeyError(f"Unknown config key: {key}")
    default = DEFAULTS[key]

    if key == "debug_level":
        value = str(value).lower()
        if value not in DEBUG_LEVELS:
            raise ValueError(f"debug_level must be one of {', '.join(DEBUG_LEVELS)}")
        return value
    if isinstance(default, bool):
        if isinstance(value, str):
            lowered = value.lower()
            if lowered in ("true", "yes", "on", "1"):
                return True
            if lowered in ("false", "no", "off", "0"):
                return False
            raise ValueError(f"{key} expects a boolean, got {value!r}")
        return bool(value)
    if isinstance(default, int):
        value = int(value)
        if value < 1:
            raise ValueError(f"{key} must be positive")
        return value
    if isinstance(default, float):
        value = float(value)
        if value <= 1.0:
            raise ValueError(f"{key} must be greater than 1")
        return value
    return value


class Config:
    def __init__(self, path=None, load=True):
        self.path = Path(path) if path else _config_path()
        self._values = dict(DEFAULTS)
        if load:
            self.load()
        self._apply_env()

    def load(self):
        if not self.path.exists():
            return
        try:
            stored = json.loads(self.path.read_text())
        except (OSError, ValueError):
            # unreadable config falls back to defaults
            return
        for key, value in stored.items():
            if key in DEFAULTS:
                try:
                    self._values[key] = _coerce(key, value)
                except (KeyError, ValueError):
                    continue

    def _apply_env(self):
        debug = os.environ.get("TREELOX_DEBUG")
        if debug:
            try:
                self._values["debug_level"] = _coerce("debug_level", debug)
            except ValueError:
                pass
        stress = os.environ.get("TREELOX_GC_STRESS")
        if stress:
            try:
                self._values["gc_stress"] = _coerce("gc_stress", stress)
            except ValueError:
                pass

    def save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._values, indent=2))

    def get(self, key):
        return self._values[key]

    def set(self, key, value, persist=True):
        self._values[key] = _coerce(key, value)
        if persist:
            self.save()
        return self._values[key]

    def reset(self, persist=True):
        self._values = dict(DEFAULTS)
        if persist:
            self.save()

    def as_dict(self):
        return dict(self._values)

    # ---- logging helpers ----------------------------------------------------

    @property
    def debug_level(self):
        return self._values["debug_level"]

    @property
    def enable_debug_logs(self):
        return self.debug_level != "none"

    def should_log(self, level="normal"):
        """True when messages of ``level`` pass the configured debug level."""
        if level == "debug":
            level = "verbose"
        if level not in DEBUG_LEVELS or level == "none":
            return False
        return DEBUG_LEVELS.index(self.debug_level) >= DEBUG_LEVELS.index(level)


config = Config()
