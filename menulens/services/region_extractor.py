"""
Region extraction from raw text-detection payloads.

The first annotation of a response is the whole-image text aggregate and is
dropped; every following annotation becomes one ``TextRegion`` in order.
Partial geometry is tolerated: missing coordinates read as 0 and missing
vertices are padded with the origin.
"""

import logging
import math
from typing import Any, List, Mapping, Sequence, Union

from pydantic import ValidationError

from ..models.overlay import ORIGIN, Point, TextRegion
from ..schemas.recognition import AnnotateResponse, EntityAnnotation

logger = logging.getLogger(__name__)

CORNER_COUNT = 4

RawPayload = Union[AnnotateResponse, Mapping[str, Any], None]


def parse_payload(payload: RawPayload) -> AnnotateResponse:
    """
    Validate a raw payload into an ``AnnotateResponse``.

    Anything that does not look like a recognizer response is treated as an
    empty result.
    """
    if isinstance(payload, AnnotateResponse):
        return payload
    if not isinstance(payload, Mapping):
        return AnnotateResponse()
    try:
        return AnnotateResponse.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Unrecognized text-detection payload, treating as empty: {e.error_count()} errors")
        return AnnotateResponse()


def _corners(annotation: EntityAnnotation) -> tuple:
    points = [Point(v.x, v.y) for v in annotation.bounding_poly.vertices[:CORNER_COUNT]]
    points.extend([ORIGIN] * (CORNER_COUNT - len(points)))
    return tuple(points)


def normalize_corners(corners: Sequence[Point]) -> tuple:
    """
    Reorder a quadrilateral to top-left, top-right, bottom-right, bottom-left.

    Corners are sorted clockwise around their centroid (image y grows
    downwards) and rotated so the corner nearest the origin comes first.
    """
    cx = sum(p.x for p in corners) / len(corners)
    cy = sum(p.y for p in corners) / len(corners)
    ordered = sorted(corners, key=lambda p: math.atan2(p.y - cy, p.x - cx))
    start = min(range(len(ordered)), key=lambda i: (ordered[i].x + ordered[i].y, ordered[i].y))
    return tuple(ordered[start:] + ordered[:start])


def extract_regions(payload: RawPayload, normalize: bool = False) -> List[TextRegion]:
    """
    Convert a text-detection response into an ordered list of regions.

    Args:
        payload: Decoded ``images:annotate`` JSON or a validated response
        normalize: Reorder each polygon's corners instead of trusting the
            recognizer's ordering

    Returns:
        One region per annotation after the first; empty when the response has
        no annotations
    """
    annotations = parse_payload(payload).first_annotations()
    if not annotations:
        logger.info("Text detection returned no annotations")
        return []

    regions = []
    for annotation in annotations[1:]:
        corners = _corners(annotation)
        if normalize:
            corners = normalize_corners(corners)
        regions.append(TextRegion(text=annotation.description, corners=corners))

    logger.info(f"Extracted {len(regions)} text regions")
    return regions
