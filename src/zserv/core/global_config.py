"""
global_config.py
Process-wide settings for zserv. Only logging verbosity lives here; serving options
are carried by an explicit ServeConfig value.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import os


class GlobalConfig:
    _defaults = {
        "debug_level": 0,
    }
    _settings = _defaults.copy()

    @classmethod
    def set(cls, key, value):
        if key not in cls._defaults:
            raise KeyError(f"Unknown global setting '{key}'")
        cls._settings[key] = value

    @classmethod
    def get(cls, key):
        return cls._settings.get(key, cls._defaults.get(key))

    @classmethod
    def reset(cls, key=None):
        if key is None:
            cls._settings = cls._defaults.copy()
        elif key in cls._defaults:
            cls._settings[key] = cls._defaults[key]

    @classmethod
    def set_debug_level(cls, value: int):
        cls.set("debug_level", int(value))

    @classmethod
    def get_debug_level(cls) -> int:
        return cls.get("debug_level")

    @classmethod
    def load_environment(cls):
        """Apply ZSERV_DEBUG_LEVEL from the environment, if set."""
        level = os.environ.get("ZSERV_DEBUG_LEVEL")
        if level is not None:
            cls.set_debug_level(level)
