"""Selection state machine: Idle <-> Selected(text)."""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.exceptions import RegionNotFoundError
from ..models.overlay import TextRegion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionState:
    """Empty ``selected_text`` means Idle (no popup shown)"""
    selected_text: str = ""
    region_index: Optional[int] = None

    @property
    def is_selected(self) -> bool:
        return bool(self.selected_text)


IDLE = SelectionState()


def select(state: SelectionState, text: str, region_index: Optional[int] = None) -> SelectionState:
    # selecting while selected simply replaces the text
    key = text.strip()
    if not key:
        return IDLE
    return SelectionState(selected_text=key, region_index=region_index)


def select_region(state: SelectionState, regions: Sequence[TextRegion], index: int) -> SelectionState:
    if not 0 <= index < len(regions):
        raise RegionNotFoundError(index, len(regions))
    return select(state, regions[index].text, region_index=index)


def dismiss(state: SelectionState) -> SelectionState:
    return IDLE


class SelectionController:
    """Stateful wrapper around the selection transitions for single-view callers."""

    def __init__(self):
        self.state = IDLE

    @property
    def selected_text(self) -> str:
        return self.state.selected_text

    def select(self, text: str) -> SelectionState:
        self.state = select(self.state, text)
        logger.debug(f"Selected '{self.state.selected_text}'")
        return self.state

    def select_region(self, regions: Sequence[TextRegion], index: int) -> SelectionState:
        self.state = select_region(self.state, regions, index)
        return self.state

    def dismiss(self) -> SelectionState:
        self.state = dismiss(self.state)
        return self.state

    def reset(self) -> SelectionState:
        self.state = IDLE
        return self.state
