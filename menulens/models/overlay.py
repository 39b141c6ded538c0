"""
Internal data models for recognized text regions and their overlay geometry.

Everything here is immutable. A new recognition response produces a new list
of regions; a layout change produces a new ``DisplayFrame``.
"""

from dataclasses import dataclass
from typing import Tuple, Union

Number = Union[int, float]


@dataclass(frozen=True)
class Point:
    """Pixel coordinate in natural (untransformed) image space"""
    x: Number = 0
    y: Number = 0


ORIGIN = Point(0, 0)


@dataclass(frozen=True)
class TextRegion:
    """
    A detected span of text with its bounding quadrilateral.

    Corners are ordered top-left, top-right, bottom-right, bottom-left.
    """
    text: str
    corners: Tuple[Point, Point, Point, Point]

    def __post_init__(self):
        if len(self.corners) != 4:
            raise ValueError("TextRegion needs exactly 4 corners")

    @property
    def top_left(self) -> Point:
        return self.corners[0]

    @property
    def key(self) -> str:
        """Lookup key: recognizer fragments may carry trailing newlines"""
        return self.text.strip()


@dataclass(frozen=True)
class DisplayFrame:
    """
    Natural and rendered size of the displayed image element.

    A frame only exists once the natural size is known, so a scale derived
    from it can never divide by zero.
    """
    natural_width: Number
    natural_height: Number
    rendered_width: Number
    rendered_height: Number

    def __post_init__(self):
        if not (self.natural_width > 0 and self.natural_height > 0):
            raise ValueError("Natural image dimensions must be known and non-zero")
        if self.rendered_width < 0 or self.rendered_height < 0:
            raise ValueError("Rendered image dimensions cannot be negative")


@dataclass(frozen=True)
class Scale:
    sx: float = 1.0
    sy: float = 1.0

    @classmethod
    def identity(cls) -> "Scale":
        return cls(1.0, 1.0)

    @classmethod
    def from_frame(cls, frame: DisplayFrame) -> "Scale":
        return cls(
            frame.rendered_width / frame.natural_width,
            frame.rendered_height / frame.natural_height,
        )


@dataclass(frozen=True)
class HitTarget:
    """Clickable overlay rectangle for one region, keyed by region index"""
    index: int
    text: str
    left: Number
    top: Number
    width: Number
    height: Number

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0
