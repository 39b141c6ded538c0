"""
Viewer session state and its reducers.

A session is one immutable ``SessionState`` value. Every event (upload,
recognition result, layout change, tap, dismiss, reset) is a pure function
from the current state to the next one, and the store swaps the whole value.
Upload results carry the ``generation`` they were started under; results
from a superseded upload are discarded.
"""

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Sequence, Tuple

from .exceptions import SessionNotFoundError
from ..models.overlay import DisplayFrame, HitTarget, TextRegion
from ..services.coordinate_mapper import CoordinateMapper
from ..services.image_preprocess import PreparedImage
from ..services.menu_lookup import MenuLookup
from ..services import selection as sel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    image: Optional[PreparedImage] = None
    regions: Tuple[TextRegion, ...] = ()
    selection: sel.SelectionState = sel.IDLE
    display_frame: Optional[DisplayFrame] = None
    loading: bool = False
    notice: Optional[str] = None
    generation: int = 0
    menu: MenuLookup = field(default_factory=MenuLookup, compare=False)

    def is_current(self, generation: int) -> bool:
        return generation == self.generation


def new_session(menu: Optional[MenuLookup] = None) -> SessionState:
    return SessionState(menu=menu or MenuLookup())


# --- upload pipeline events ---

def upload_started(state: SessionState) -> SessionState:
    return replace(state, loading=True, notice=None, generation=state.generation + 1)


def image_prepared(state: SessionState, generation: int, image: PreparedImage) -> SessionState:
    if not state.is_current(generation):
        return state
    # new image: old regions, selection and frame no longer apply
    return replace(state, image=image, regions=(), selection=sel.IDLE, display_frame=None)


def recognition_succeeded(state: SessionState, generation: int, regions: Sequence[TextRegion]) -> SessionState:
    if not state.is_current(generation):
        return state
    return replace(state, regions=tuple(regions), selection=sel.IDLE, notice=None)


def recognition_failed(state: SessionState, generation: int, notice: str) -> SessionState:
    if not state.is_current(generation):
        return state
    return replace(state, regions=(), selection=sel.IDLE, notice=notice)


def upload_finished(state: SessionState, generation: int) -> SessionState:
    if not state.is_current(generation):
        return state
    return replace(state, loading=False)


# --- view events ---

def frame_measured(state: SessionState, frame: DisplayFrame) -> SessionState:
    return replace(state, display_frame=frame)


def region_selected(state: SessionState, index: int) -> SessionState:
    return replace(state, selection=sel.select_region(state.selection, state.regions, index))


def text_selected(state: SessionState, text: str) -> SessionState:
    return replace(state, selection=sel.select(state.selection, text))


def selection_dismissed(state: SessionState) -> SessionState:
    return replace(state, selection=sel.dismiss(state.selection))


def session_reset(state: SessionState) -> SessionState:
    # bumping the generation drops any upload still in flight
    return SessionState(menu=state.menu, generation=state.generation + 1)


# --- derived values ---

def hit_targets(state: SessionState, mapper: CoordinateMapper) -> List[HitTarget]:
    """Overlay rectangles, or none until the geometry they depend on is known"""
    if state.image is None or not state.regions:
        return []
    if mapper.needs_frame and state.display_frame is None:
        return []
    return mapper.map_regions(state.regions, state.display_frame)


def description(state: SessionState) -> Optional[str]:
    if not state.selection.is_selected:
        return None
    return state.menu.lookup(state.selection.selected_text)


class SessionStore:
    """In-memory sessions keyed by id; the oldest are evicted past ``max_sessions``"""

    def __init__(self, menu: Optional[MenuLookup] = None, max_sessions: int = 1000):
        self.menu = menu or MenuLookup()
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, SessionState]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create(self) -> Tuple[str, SessionState]:
        session_id = uuid.uuid4().hex
        state = new_session(self.menu)
        self._sessions[session_id] = state
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info(f"Evicted session {evicted}")
        return session_id, state

    def get(self, session_id: str) -> SessionState:
        try:
            state = self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id)
        self._sessions.move_to_end(session_id)
        return state

    def apply(self, session_id: str, reducer: Callable[..., SessionState], *args) -> SessionState:
        state = reducer(self.get(session_id), *args)
        self._sessions[session_id] = state
        return state

    def apply_if_present(self, session_id: str, reducer: Callable[..., SessionState], *args) -> Optional[SessionState]:
        if session_id not in self._sessions:
            return None
        return self.apply(session_id, reducer, *args)

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
