from pydantic import BaseModel, Field, model_validator
from typing import List, Optional, Union

from menulens.core.session import SessionState, description
from menulens.models.overlay import HitTarget, TextRegion

Number = Union[int, float]


class PointOut(BaseModel):
    x: Number
    y: Number


class RegionOut(BaseModel):
    index: int
    text: str
    corners: List[PointOut]

    @classmethod
    def from_region(cls, index: int, region: TextRegion) -> "RegionOut":
        return cls(
            index=index,
            text=region.text,
            corners=[PointOut(x=p.x, y=p.y) for p in region.corners],
        )


class HitTargetOut(BaseModel):
    index: int = Field(description="Index of the source region; stable render key")
    text: str
    left: Number
    top: Number
    width: Number
    height: Number

    @classmethod
    def from_target(cls, target: HitTarget) -> "HitTargetOut":
        return cls(
            index=target.index,
            text=target.text,
            left=target.left,
            top=target.top,
            width=target.width,
            height=target.height,
        )


class ImageMeta(BaseModel):
    width: int
    height: int
    mime_type: str
    size_bytes: int


class DisplayFrameIn(BaseModel):
    rendered_width: float = Field(ge=0)
    rendered_height: float = Field(ge=0)
    natural_width: Optional[float] = Field(default=None, gt=0, description="Defaults to the prepared image width")
    natural_height: Optional[float] = Field(default=None, gt=0, description="Defaults to the prepared image height")


class SelectionIn(BaseModel):
    index: Optional[int] = Field(default=None, ge=0)
    text: Optional[str] = None

    @model_validator(mode='after')
    def exactly_one(self):
        if (self.index is None) == (self.text is None):
            raise ValueError("Provide exactly one of 'index' or 'text'")
        return self


class SelectionOut(BaseModel):
    selected_text: Optional[str] = None
    region_index: Optional[int] = None
    description: Optional[str] = None

    @classmethod
    def from_state(cls, state: SessionState) -> "SelectionOut":
        if not state.selection.is_selected:
            return cls()
        return cls(
            selected_text=state.selection.selected_text,
            region_index=state.selection.region_index,
            description=description(state),
        )


class SessionSnapshot(BaseModel):
    session_id: str
    loading: bool
    notice: Optional[str] = None
    image: Optional[ImageMeta] = None
    regions: List[RegionOut] = Field(default_factory=list)
    selection: SelectionOut = Field(default_factory=SelectionOut)
    strategy: str
    awaiting_display_frame: bool = False

    @classmethod
    def from_state(cls, session_id: str, state: SessionState, strategy: str, needs_frame: bool) -> "SessionSnapshot":
        image = None
        if state.image is not None:
            image = ImageMeta(
                width=state.image.width,
                height=state.image.height,
                mime_type=state.image.mime_type,
                size_bytes=state.image.size_bytes,
            )
        return cls(
            session_id=session_id,
            loading=state.loading,
            notice=state.notice,
            image=image,
            regions=[RegionOut.from_region(i, r) for i, r in enumerate(state.regions)],
            selection=SelectionOut.from_state(state),
            strategy=strategy,
            awaiting_display_frame=needs_frame and state.image is not None and state.display_frame is None,
        )


class HitTargetsOut(BaseModel):
    strategy: str
    awaiting_display_frame: bool = False
    targets: List[HitTargetOut] = Field(default_factory=list)


class LookupOut(BaseModel):
    name: str
    description: str
    found: bool
