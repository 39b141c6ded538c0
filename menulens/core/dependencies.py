"""
Dependency injection setup for FastAPI.
Provides dependency providers for core services with lifecycle management.
"""

from fastapi import Depends, Request
from typing import Optional
import asyncio
import logging
import uuid

from menulens.config.settings import Settings, get_settings
from menulens.core.pipeline import UploadPipeline
from menulens.core.session import SessionStore
from menulens.services.coordinate_mapper import CoordinateMapper
from menulens.services.image_preprocess import ImageCompressor
from menulens.services.menu_lookup import MenuLookup
from menulens.services.recognizer import BaseRecognizer, create_recognizer

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for the application's long-lived services.

    Collaborators passed to the constructor are used as-is; the rest are built
    from settings on first initialization.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        recognizer: Optional[BaseRecognizer] = None,
        menu: Optional[MenuLookup] = None,
    ):
        self.settings = settings or get_settings()
        self._recognizer = recognizer
        self._menu = menu
        self._compressor: Optional[ImageCompressor] = None
        self._mapper: Optional[CoordinateMapper] = None
        self._store: Optional[SessionStore] = None
        self._pipeline: Optional[UploadPipeline] = None
        self._initialized = False
        self._initialization_lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize_services(self) -> None:
        async with self._initialization_lock:
            if self._initialized:
                return

            logger.info("Initializing service container")

            if self._menu is None:
                self._menu = MenuLookup.from_csv(
                    self.settings.get_menu_csv_path(),
                    fallback=self.settings.menu.fallback_description,
                )
            if self._recognizer is None:
                self._recognizer = create_recognizer(
                    self.settings.vision,
                    require_credentials=self.settings.is_production(),
                )

            self._compressor = ImageCompressor(self.settings.preprocess)
            self._mapper = CoordinateMapper(self.settings.overlay.strategy)
            self._store = SessionStore(self._menu, max_sessions=self.settings.max_sessions)
            self._pipeline = UploadPipeline(
                store=self._store,
                compressor=self._compressor,
                recognizer=self._recognizer,
                normalize_corners=self.settings.overlay.normalize_corners,
            )

            self._initialized = True
            logger.info(
                "Service container initialization completed",
                extra={
                    'recognizer': self._recognizer.name,
                    'menu_entries': len(self._menu),
                    'overlay_strategy': self._mapper.strategy.value,
                }
            )

    async def cleanup_services(self) -> None:
        logger.info("Cleaning up service container")
        self._pipeline = None
        self._store = None
        self._initialized = False

    @property
    def menu(self) -> MenuLookup:
        return self._menu

    @property
    def recognizer(self) -> BaseRecognizer:
        return self._recognizer

    @property
    def compressor(self) -> ImageCompressor:
        return self._compressor

    @property
    def mapper(self) -> CoordinateMapper:
        return self._mapper

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def pipeline(self) -> UploadPipeline:
        return self._pipeline


# Global service container instance
service_container = ServiceContainer()


async def get_service_container() -> ServiceContainer:
    await service_container.initialize_services()
    return service_container


async def get_session_store(container: ServiceContainer = Depends(get_service_container)) -> SessionStore:
    await container.initialize_services()
    return container.store


async def get_upload_pipeline(container: ServiceContainer = Depends(get_service_container)) -> UploadPipeline:
    await container.initialize_services()
    return container.pipeline


async def get_coordinate_mapper(container: ServiceContainer = Depends(get_service_container)) -> CoordinateMapper:
    await container.initialize_services()
    return container.mapper


async def get_menu_lookup(container: ServiceContainer = Depends(get_service_container)) -> MenuLookup:
    await container.initialize_services()
    return container.menu


async def get_recognizer(container: ServiceContainer = Depends(get_service_container)) -> BaseRecognizer:
    await container.initialize_services()
    return container.recognizer


def get_request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', None) or str(uuid.uuid4())
