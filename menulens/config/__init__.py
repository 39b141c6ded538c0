"""
Configuration package for MenuLens.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    RenderStrategy,
    VisionSettings,
    PreprocessSettings,
    MenuSettings,
    OverlaySettings,
    SecuritySettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "RenderStrategy",
    "VisionSettings",
    "PreprocessSettings",
    "MenuSettings",
    "OverlaySettings",
    "SecuritySettings",
    "settings",
    "get_settings",
    "reload_settings",
]
