"""
Custom exceptions for the MenuLens backend.

Tolerated conditions (partial geometry, empty recognition, unknown dish names)
never raise; everything here is either a request-level failure or a recoverable
upload failure that the pipeline turns into a session notice.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Image validation errors
    INVALID_IMAGE_FORMAT = "INVALID_IMAGE_FORMAT"
    IMAGE_TOO_LARGE = "IMAGE_TOO_LARGE"
    IMAGE_CORRUPTED = "IMAGE_CORRUPTED"

    # Recognition errors
    OCR_PROCESSING_FAILED = "OCR_PROCESSING_FAILED"
    RECOGNIZER_UNAVAILABLE = "RECOGNIZER_UNAVAILABLE"

    # Overlay / session errors
    DISPLAY_FRAME_NOT_READY = "DISPLAY_FRAME_NOT_READY"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    REGION_NOT_FOUND = "REGION_NOT_FOUND"

    # Generic errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class MenuLensException(Exception):
    """Base exception for the MenuLens backend."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class ImageValidationError(MenuLensException):
    """Raised when an uploaded file is not a usable image."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_IMAGE_FORMAT,
            details=details,
            status_code=400
        )


class ImageTooLargeError(MenuLensException):
    """Raised when uploaded image exceeds size limits."""

    def __init__(self, size_mb: float, max_size_mb: float):
        super().__init__(
            message=f"Image size {size_mb:.1f}MB exceeds maximum allowed size of {max_size_mb}MB",
            error_code=ErrorCode.IMAGE_TOO_LARGE,
            details={"size_mb": size_mb, "max_size_mb": max_size_mb},
            status_code=413
        )


class ImageCorruptedError(MenuLensException):
    """Raised when image is corrupted or unreadable."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Image is corrupted or unreadable",
            error_code=ErrorCode.IMAGE_CORRUPTED,
            details=details,
            status_code=400
        )


class RecognitionError(MenuLensException):
    """Raised when the text-detection service call fails."""

    def __init__(self, message: str = "Text recognition failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.OCR_PROCESSING_FAILED,
            details=details,
            status_code=502
        )


class RecognizerUnavailableError(MenuLensException):
    """Raised when no recognizer can be used (missing credentials)."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Text recognition service is not configured",
            error_code=ErrorCode.RECOGNIZER_UNAVAILABLE,
            details=details,
            status_code=503
        )


class DisplayFrameNotReadyError(MenuLensException):
    """Raised when scaled geometry is requested before the image size is known."""

    def __init__(self):
        super().__init__(
            message="Display frame is not known yet; report the rendered image size first",
            error_code=ErrorCode.DISPLAY_FRAME_NOT_READY,
            status_code=409
        )


class SessionNotFoundError(MenuLensException):
    """Raised when a session id is unknown."""

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session '{session_id}' not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": session_id},
            status_code=404
        )


class RegionNotFoundError(MenuLensException):
    """Raised when a selection refers to a region index that does not exist."""

    def __init__(self, index: int, region_count: int):
        super().__init__(
            message=f"Region {index} does not exist",
            error_code=ErrorCode.REGION_NOT_FOUND,
            details={"index": index, "region_count": region_count},
            status_code=404
        )
