"""
Menu description lookup.

The description table is loaded once at startup from a CSV file with a
``name,description`` header and is read-only afterwards. Unknown dish names
are an expected outcome and resolve to a fixed fallback text.
"""

import csv
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Union

logger = logging.getLogger(__name__)

DESCRIPTION_NOT_FOUND = "description not found"


def load_menu_csv(path: Union[str, Path]) -> List[dict]:
    """
    Read description rows from a CSV file.

    Returns an empty list when the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"Menu description file {path} not found; descriptions will be unavailable")
        return []

    # utf-8-sig strips the BOM spreadsheet exports put in front of the header
    with path.open(newline="", encoding="utf-8-sig") as f:
        rows = list(csv.DictReader(f))

    logger.info(f"Loaded {len(rows)} menu description rows from {path}")
    return rows


class MenuLookup:
    """Exact, case-sensitive, whitespace-trimmed dish name lookup"""

    def __init__(self, descriptions: Optional[Mapping[str, str]] = None, fallback: str = DESCRIPTION_NOT_FOUND):
        self._descriptions = MappingProxyType(dict(descriptions or {}))
        self.fallback = fallback

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Optional[str]]], fallback: str = DESCRIPTION_NOT_FOUND) -> "MenuLookup":
        descriptions = {}
        for row in rows:
            name = (row.get("name") or "").strip()
            description = (row.get("description") or "").strip()
            if name and description:
                descriptions[name] = description
        return cls(descriptions, fallback=fallback)

    @classmethod
    def from_csv(cls, path: Union[str, Path], fallback: str = DESCRIPTION_NOT_FOUND) -> "MenuLookup":
        return cls.from_rows(load_menu_csv(path), fallback=fallback)

    @property
    def descriptions(self) -> Mapping[str, str]:
        return self._descriptions

    def __len__(self) -> int:
        return len(self._descriptions)

    def __contains__(self, name: str) -> bool:
        return name.strip() in self._descriptions

    def lookup(self, name: str) -> str:
        return self._descriptions.get(name.strip(), self.fallback)
