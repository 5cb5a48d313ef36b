"""Configuration package."""

from investclub.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
