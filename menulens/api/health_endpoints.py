"""
Health check endpoint.

Reports recognizer availability and menu table size. The service stays
usable without either (the mock recognizer and the fallback description
cover them), so missing pieces mark it "degraded", never "unhealthy".
"""

from fastapi import APIRouter, Depends
from datetime import datetime, timezone
import logging
import time

from menulens.config.settings import get_settings
from menulens.core.dependencies import ServiceContainer, get_service_container
from menulens.core.error_handlers import error_handler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Application start time for uptime calculation
_app_start_time = time.time()


@router.get("/health")
async def health_check(container: ServiceContainer = Depends(get_service_container)):
    await container.initialize_services()
    settings = get_settings()
    recognizer = container.recognizer

    try:
        recognizer_ok = await recognizer.health_check()
    except Exception as e:
        logger.error(f"Recognizer health check failed: {e}")
        recognizer_ok = False

    details = {
        "recognizer": {
            "name": recognizer.name,
            "status": "healthy" if recognizer_ok else "unhealthy",
        },
        "menu": {
            "entries": len(container.menu),
            "status": "healthy" if len(container.menu) else "empty",
        },
        "sessions": len(container.store),
        "image_limits": container.compressor.get_size_limits(),
        "overlay_strategy": container.mapper.strategy.value,
    }

    status = "healthy" if recognizer_ok and len(container.menu) else "degraded"

    return {
        "status": status,
        "version": settings.app_version,
        "uptime_seconds": round(time.time() - _app_start_time, 1),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "details": details,
        "error_statistics": error_handler.get_error_statistics(),
    }
