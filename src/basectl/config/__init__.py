"""
Config package export.

Keeps import sites clean and stable:
    from basectl.config import get_settings, Settings
"""

from __future__ import annotations

from .settings import Environment, Settings, get_settings

__all__ = ["Environment", "Settings", "get_settings"]
