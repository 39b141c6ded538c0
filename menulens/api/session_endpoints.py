"""
Viewer session endpoints.

A session mirrors one screen of the menu viewer:
- POST /sessions: open a viewer
- POST /sessions/{id}/image: upload a menu photo (compress, recognize, extract)
- PUT /sessions/{id}/display-frame: report the rendered image size
- GET /sessions/{id}/hit-targets: overlay rectangles for the current geometry
- POST/DELETE /sessions/{id}/selection: tap a region / dismiss the popup
- POST /sessions/{id}/reset: return to the upload screen
"""

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import Response
import logging

from menulens.core.dependencies import (
    get_coordinate_mapper,
    get_request_id,
    get_session_store,
    get_upload_pipeline,
)
from menulens.core.exceptions import DisplayFrameNotReadyError, ImageValidationError
from menulens.core.pipeline import UploadPipeline
from menulens.core import session as sessions
from menulens.core.session import SessionStore
from menulens.models.overlay import DisplayFrame
from menulens.schemas.base import Envelope
from menulens.schemas.session import (
    DisplayFrameIn,
    HitTargetOut,
    HitTargetsOut,
    SelectionIn,
    SelectionOut,
    SessionSnapshot,
)
from menulens.services.coordinate_mapper import CoordinateMapper

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


def _snapshot(session_id: str, state: sessions.SessionState, mapper: CoordinateMapper) -> SessionSnapshot:
    return SessionSnapshot.from_state(session_id, state, mapper.strategy.value, mapper.needs_frame)


def _targets(state: sessions.SessionState, mapper: CoordinateMapper) -> HitTargetsOut:
    awaiting = mapper.needs_frame and state.image is not None and state.display_frame is None
    return HitTargetsOut(
        strategy=mapper.strategy.value,
        awaiting_display_frame=awaiting,
        targets=[HitTargetOut.from_target(t) for t in sessions.hit_targets(state, mapper)],
    )


@router.post("", response_model=Envelope[SessionSnapshot])
async def create_session(
    store: SessionStore = Depends(get_session_store),
    mapper: CoordinateMapper = Depends(get_coordinate_mapper),
):
    session_id, state = store.create()
    logger.info(f"Session {session_id} created")
    return Envelope[SessionSnapshot](status="ok", data=_snapshot(session_id, state, mapper))


@router.get("/{session_id}", response_model=Envelope[SessionSnapshot])
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    mapper: CoordinateMapper = Depends(get_coordinate_mapper),
):
    return Envelope[SessionSnapshot](status="ok", data=_snapshot(session_id, store.get(session_id), mapper))


@router.delete("/{session_id}", response_model=Envelope[None])
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.delete(session_id)
    return Envelope[None](status="ok")


@router.post("/{session_id}/image", response_model=Envelope[SessionSnapshot])
async def upload_image(
    session_id: str,
    image: UploadFile = File(..., description="Menu photo (JPEG, PNG, WebP, ...)"),
    store: SessionStore = Depends(get_session_store),
    pipeline: UploadPipeline = Depends(get_upload_pipeline),
    mapper: CoordinateMapper = Depends(get_coordinate_mapper),
    request_id: str = Depends(get_request_id),
):
    """
    Run an upload through compression and text detection.

    Collaborator failures do not fail the request: the returned snapshot
    carries a ``notice`` and ``loading`` is already cleared.
    """
    store.get(session_id)

    image_data = await image.read()
    if not image_data:
        raise ImageValidationError("No image data provided")

    logger.info(
        f"Upload for session {session_id}",
        extra={
            'request_id': request_id,
            'image_filename': image.filename,
            'image_content_type': image.content_type,
            'size_bytes': len(image_data),
        }
    )

    state = await pipeline.run(session_id, image_data, request_id=request_id)
    return Envelope[SessionSnapshot](status="ok", data=_snapshot(session_id, state, mapper))


@router.get("/{session_id}/image")
async def get_image(session_id: str, store: SessionStore = Depends(get_session_store)):
    state = store.get(session_id)
    if state.image is None:
        return Response(status_code=204)
    return Response(content=state.image.content, media_type=state.image.mime_type)


@router.put("/{session_id}/display-frame", response_model=Envelope[HitTargetsOut])
async def put_display_frame(
    session_id: str,
    body: DisplayFrameIn,
    store: SessionStore = Depends(get_session_store),
    mapper: CoordinateMapper = Depends(get_coordinate_mapper),
):
    """Record the rendered size after load or any resize and return recomputed targets."""
    state = store.get(session_id)

    natural_width = body.natural_width or (state.image.width if state.image else None)
    natural_height = body.natural_height or (state.image.height if state.image else None)
    if not natural_width or not natural_height:
        raise DisplayFrameNotReadyError()

    frame = DisplayFrame(
        natural_width=natural_width,
        natural_height=natural_height,
        rendered_width=body.rendered_width,
        rendered_height=body.rendered_height,
    )
    state = store.apply(session_id, sessions.frame_measured, frame)
    return Envelope[HitTargetsOut](status="ok", data=_targets(state, mapper))


@router.get("/{session_id}/hit-targets", response_model=Envelope[HitTargetsOut])
async def get_hit_targets(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    mapper: CoordinateMapper = Depends(get_coordinate_mapper),
):
    return Envelope[HitTargetsOut](status="ok", data=_targets(store.get(session_id), mapper))


@router.post("/{session_id}/selection", response_model=Envelope[SelectionOut])
async def select(
    session_id: str,
    body: SelectionIn,
    store: SessionStore = Depends(get_session_store),
):
    if body.index is not None:
        state = store.apply(session_id, sessions.region_selected, body.index)
    else:
        state = store.apply(session_id, sessions.text_selected, body.text)
    return Envelope[SelectionOut](status="ok", data=SelectionOut.from_state(state))


@router.delete("/{session_id}/selection", response_model=Envelope[SelectionOut])
async def dismiss(session_id: str, store: SessionStore = Depends(get_session_store)):
    state = store.apply(session_id, sessions.selection_dismissed)
    return Envelope[SelectionOut](status="ok", data=SelectionOut.from_state(state))


@router.post("/{session_id}/reset", response_model=Envelope[SessionSnapshot])
async def reset(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    mapper: CoordinateMapper = Depends(get_coordinate_mapper),
):
    state = store.apply(session_id, sessions.session_reset)
    return Envelope[SessionSnapshot](status="ok", data=_snapshot(session_id, state, mapper))
