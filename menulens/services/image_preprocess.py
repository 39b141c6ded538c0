"""
Image validation and compression before text detection.

Uploads are re-encoded as JPEG with the longest side capped and the quality
lowered until the encoded size fits the byte cap. The natural size of the
prepared image is the coordinate space of every region the recognizer returns,
so the same bytes must be both recognized and displayed.
"""

import asyncio
import base64
import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from ..config.settings import PreprocessSettings
from ..core.exceptions import ImageCorruptedError, ImageTooLargeError, ImageValidationError

logger = logging.getLogger(__name__)

MB = 1024 * 1024


class ImageFormat(str, Enum):
    """Accepted upload formats"""
    JPEG = "JPEG"
    MPO = "MPO"  # multi-picture JPEG written by many phone cameras
    PNG = "PNG"
    WEBP = "WEBP"
    GIF = "GIF"
    BMP = "BMP"


@dataclass(frozen=True)
class PreparedImage:
    """Compressed image ready for recognition and display"""
    content: bytes
    width: int
    height: int
    mime_type: str = "image/jpeg"

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    def to_base64(self) -> str:
        return base64.b64encode(self.content).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"


class ImageCompressor:
    """
    Validates uploads and compresses them within pixel and byte caps.
    """

    SUPPORTED_FORMATS = {fmt.value for fmt in ImageFormat}
    DOWNSCALE_STEP = 0.8
    QUALITY_STEP = 10
    MAX_PASSES = 12

    def __init__(self, settings: Optional[PreprocessSettings] = None):
        self.settings = settings or PreprocessSettings()
        self.max_bytes = int(self.settings.max_size_mb * MB)
        self.max_upload_bytes = self.settings.max_upload_mb * MB

    def open_image(self, image_data: bytes) -> Image.Image:
        """
        Validate upload size, format and integrity, and return the decoded image.

        Raises:
            ImageTooLargeError: upload exceeds ``max_upload_mb``
            ImageValidationError: empty upload, unsupported format or too many pixels
            ImageCorruptedError: data cannot be decoded
        """
        if not image_data:
            raise ImageValidationError("Empty image upload")

        if len(image_data) > self.max_upload_bytes:
            raise ImageTooLargeError(len(image_data) / MB, self.settings.max_upload_mb)

        try:
            image = Image.open(io.BytesIO(image_data))
        except UnidentifiedImageError:
            raise ImageValidationError(
                "Cannot determine image format",
                details={"supported_formats": sorted(self.SUPPORTED_FORMATS)}
            )
        except Image.DecompressionBombError as e:
            raise self._too_many_pixels(e)

        if image.format not in self.SUPPORTED_FORMATS:
            raise ImageValidationError(
                f"Unsupported image format: {image.format}",
                details={"supported_formats": sorted(self.SUPPORTED_FORMATS)}
            )

        try:
            image.load()
        except Image.DecompressionBombError as e:
            raise self._too_many_pixels(e)
        except (OSError, ValueError, SyntaxError) as e:
            raise ImageCorruptedError(details={"reason": str(e)})

        return image

    @staticmethod
    def _too_many_pixels(error: Exception) -> ImageValidationError:
        return ImageValidationError(
            "Image dimensions are too large",
            details={"reason": str(error), "max_pixels": Image.MAX_IMAGE_PIXELS}
        )

    def _encode(self, image: Image.Image, quality: int) -> bytes:
        buffered = io.BytesIO()
        image.save(buffered, format="JPEG", quality=quality, optimize=True)
        return buffered.getvalue()

    def compress(self, image_data: bytes) -> PreparedImage:
        """
        Compress raw upload bytes within the configured caps.

        Args:
            image_data: Raw uploaded file

        Returns:
            PreparedImage with JPEG bytes and natural pixel size
        """
        image = self.open_image(image_data)
        original_size = image.size

        # phone photos carry their rotation in EXIF; bake it in so the
        # recognizer and the viewer see the same orientation
        image = ImageOps.exif_transpose(image)
        if image.mode != "RGB":
            image = image.convert("RGB")

        cap = self.settings.max_width_or_height
        if max(image.size) > cap:
            image.thumbnail((cap, cap), Image.Resampling.LANCZOS)

        quality = self.settings.initial_quality
        content = self._encode(image, quality)
        passes = 0
        while len(content) > self.max_bytes and passes < self.MAX_PASSES:
            passes += 1
            if quality - self.QUALITY_STEP >= self.settings.min_quality:
                quality -= self.QUALITY_STEP
            else:
                new_size = (
                    max(1, int(image.width * self.DOWNSCALE_STEP)),
                    max(1, int(image.height * self.DOWNSCALE_STEP)),
                )
                image = image.resize(new_size, Image.Resampling.LANCZOS)
            content = self._encode(image, quality)

        if len(content) > self.max_bytes:
            logger.warning(
                f"Compressed image still {len(content)} bytes after {passes} passes "
                f"(cap {self.max_bytes})"
            )

        logger.info(
            f"Image compressed: {original_size[0]}x{original_size[1]} -> "
            f"{image.width}x{image.height}, {len(image_data)} -> {len(content)} bytes (quality {quality})"
        )
        return PreparedImage(content=content, width=image.width, height=image.height)

    async def prepare(self, image_data: bytes) -> PreparedImage:
        """Compress off the event loop."""
        return await asyncio.to_thread(self.compress, image_data)

    def get_size_limits(self) -> Dict[str, float]:
        """Get compression caps"""
        return {
            'max_size_mb': self.settings.max_size_mb,
            'max_width_or_height': self.settings.max_width_or_height,
            'max_upload_mb': self.settings.max_upload_mb,
        }
