# Business logic services

from .region_extractor import extract_regions, normalize_corners, parse_payload
from .coordinate_mapper import CoordinateMapper, natural_rect
from .selection import SelectionController, SelectionState, IDLE
from .menu_lookup import MenuLookup, load_menu_csv, DESCRIPTION_NOT_FOUND
from .image_preprocess import ImageCompressor, PreparedImage, ImageFormat
from .recognizer import (
    BaseRecognizer,
    GoogleVisionRecognizer,
    MockRecognizer,
    create_recognizer,
)

__all__ = [
    "extract_regions",
    "normalize_corners",
    "parse_payload",
    "CoordinateMapper",
    "natural_rect",
    "SelectionController",
    "SelectionState",
    "IDLE",
    "MenuLookup",
    "load_menu_csv",
    "DESCRIPTION_NOT_FOUND",
    "ImageCompressor",
    "PreparedImage",
    "ImageFormat",
    "BaseRecognizer",
    "GoogleVisionRecognizer",
    "MockRecognizer",
    "create_recognizer",
]
