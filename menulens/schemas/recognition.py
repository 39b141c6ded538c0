"""
Validated view of the text-detection service's ``images:annotate`` payload.

Field presence is never trusted: every field has a default, and explicit
``null`` coordinates are read as 0.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]


class Vertex(BaseModel):
    model_config = ConfigDict(extra="ignore")

    x: Number = 0
    y: Number = 0

    @field_validator('x', 'y', mode='before')
    @classmethod
    def default_missing(cls, v):
        return 0 if v is None else v


class BoundingPoly(BaseModel):
    model_config = ConfigDict(extra="ignore")

    vertices: List[Vertex] = Field(default_factory=list)

    @field_validator('vertices', mode='before')
    @classmethod
    def default_vertices(cls, v):
        # Vision omits empty vertex objects entirely or sends {}
        return [] if v is None else [{} if item is None else item for item in v]


class EntityAnnotation(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    description: str = ""
    locale: Optional[str] = None
    bounding_poly: BoundingPoly = Field(default_factory=BoundingPoly, alias="boundingPoly")

    @field_validator('description', mode='before')
    @classmethod
    def default_description(cls, v):
        return "" if v is None else v

    @field_validator('bounding_poly', mode='before')
    @classmethod
    def default_poly(cls, v):
        return {} if v is None else v


class AnnotateImageResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    text_annotations: List[EntityAnnotation] = Field(default_factory=list, alias="textAnnotations")
    error: Optional[Dict[str, Any]] = None

    @field_validator('text_annotations', mode='before')
    @classmethod
    def default_annotations(cls, v):
        return [] if v is None else v


class AnnotateResponse(BaseModel):
    """Batch response: one entry per requested image."""
    model_config = ConfigDict(extra="ignore")

    responses: List[AnnotateImageResponse] = Field(default_factory=list)

    @field_validator('responses', mode='before')
    @classmethod
    def default_responses(cls, v):
        return [] if v is None else v

    def first_annotations(self) -> List[EntityAnnotation]:
        """Annotations of the first image, empty when absent or errored."""
        if not self.responses:
            return []
        first = self.responses[0]
        if first.error:
            return []
        return first.text_annotations


class VisionOCRRequest(BaseModel):
    """Body of the recognition proxy route: base64 image without data-URL prefix."""
    image: str = Field(min_length=1)
