"""
Hit-target geometry for text regions.

Two rendering strategies are supported and one is chosen per deployment:

* ``NATURAL``: the image is shown at its intrinsic size inside a container
  that carries the pan/zoom transform, so rectangles are emitted verbatim in
  natural coordinates and scale together with the image.
* ``SCALED``: the image is CSS-fit to the view, so rectangles are multiplied
  by rendered/natural per axis. This needs a ``DisplayFrame`` and must be
  recomputed every time the rendered size changes.
"""

from typing import List, Optional, Sequence

from ..config.settings import RenderStrategy
from ..core.exceptions import DisplayFrameNotReadyError
from ..models.overlay import DisplayFrame, HitTarget, Scale, TextRegion


def natural_rect(region: TextRegion) -> tuple:
    """(left, top, width, height) in natural coordinates; negative sizes are kept"""
    c0, c1, c2, _ = region.corners
    return c0.x, c0.y, c1.x - c0.x, c2.y - c1.y


class CoordinateMapper:
    """Maps regions to hit targets for a fixed rendering strategy"""

    def __init__(self, strategy: RenderStrategy = RenderStrategy.NATURAL):
        self.strategy = RenderStrategy(strategy)

    @property
    def needs_frame(self) -> bool:
        return self.strategy == RenderStrategy.SCALED

    def scale_for(self, frame: Optional[DisplayFrame]) -> Scale:
        if self.strategy == RenderStrategy.NATURAL:
            return Scale.identity()
        if frame is None:
            raise DisplayFrameNotReadyError()
        return Scale.from_frame(frame)

    def map_region(
        self,
        region: TextRegion,
        frame: Optional[DisplayFrame] = None,
        index: int = 0,
    ) -> HitTarget:
        """
        Compute the hit target of one region.

        Raises:
            DisplayFrameNotReadyError: scaled strategy without a display frame
        """
        scale = self.scale_for(frame)
        left, top, width, height = natural_rect(region)
        if self.strategy == RenderStrategy.SCALED:
            left, width = left * scale.sx, width * scale.sx
            top, height = top * scale.sy, height * scale.sy
        return HitTarget(
            index=index,
            text=region.text,
            left=left,
            top=top,
            width=width,
            height=height,
        )

    def map_regions(
        self,
        regions: Sequence[TextRegion],
        frame: Optional[DisplayFrame] = None,
    ) -> List[HitTarget]:
        return [self.map_region(region, frame, index) for index, region in enumerate(regions)]
