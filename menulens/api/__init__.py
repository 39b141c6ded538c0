# API endpoints and routers

from .session_endpoints import router as session_router
from .recognition_endpoints import router as recognition_router
from .health_endpoints import router as health_router

__all__ = [
    "session_router",
    "recognition_router",
    "health_router",
]
