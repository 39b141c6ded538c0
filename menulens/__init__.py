"""MenuLens: tappable text overlays for photographed menus."""

__version__ = "1.0.0"
