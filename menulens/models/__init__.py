"""
Models package for MenuLens: immutable overlay geometry types.
"""

from .overlay import (
    Point,
    ORIGIN,
    TextRegion,
    DisplayFrame,
    Scale,
    HitTarget,
)

__all__ = [
    "Point",
    "ORIGIN",
    "TextRegion",
    "DisplayFrame",
    "Scale",
    "HitTarget",
]
