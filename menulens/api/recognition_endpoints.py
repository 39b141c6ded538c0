"""Stateless recognition and lookup endpoints."""
import base64
import binascii
import logging

from fastapi import APIRouter, Depends, Query

from menulens.core.dependencies import get_menu_lookup, get_recognizer
from menulens.core.exceptions import ImageValidationError
from menulens.schemas.base import Envelope
from menulens.schemas.recognition import VisionOCRRequest
from menulens.schemas.session import LookupOut
from menulens.services.menu_lookup import MenuLookup
from menulens.services.recognizer import BaseRecognizer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["recognition"])


@router.post("/vision-ocr")
async def vision_ocr(
    body: VisionOCRRequest,
    recognizer: BaseRecognizer = Depends(get_recognizer),
):
    """
    Pass a base64 image to the text-detection service and return its payload as-is.

    Accepts plain base64 or a ``data:`` URL.
    """
    encoded = body.image
    if encoded.startswith("data:"):
        _, _, encoded = encoded.partition(",")
    if not encoded:
        raise ImageValidationError("No image data provided")
    try:
        content = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise ImageValidationError("Image is not valid base64")

    return await recognizer.recognize(content)


@router.get("/menu/lookup", response_model=Envelope[LookupOut])
async def lookup_description(
    name: str = Query(..., min_length=1),
    menu: MenuLookup = Depends(get_menu_lookup),
):
    return Envelope[LookupOut](
        status="ok",
        data=LookupOut(name=name.strip(), description=menu.lookup(name), found=name in menu),
    )
