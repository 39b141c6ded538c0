"""
Upload pipeline: compress, recognize, extract.

One pipeline run per upload. The session's loading flag is raised when the
run starts and cleared in ``finally`` on every exit path. Failures of the
collaborators become a visible notice on the session instead of an error
response, since re-uploading always recovers.
"""

import logging
import time
from typing import Optional

import httpx

from .exceptions import MenuLensException
from .session import (
    SessionState,
    SessionStore,
    image_prepared,
    recognition_failed,
    recognition_succeeded,
    upload_finished,
    upload_started,
)
from ..services.image_preprocess import ImageCompressor
from ..services.recognizer import BaseRecognizer
from ..services.region_extractor import extract_regions

logger = logging.getLogger(__name__)


class UploadPipeline:
    """Runs one upload through compression and text detection for a session"""

    def __init__(
        self,
        store: SessionStore,
        compressor: ImageCompressor,
        recognizer: BaseRecognizer,
        normalize_corners: bool = False,
    ):
        self.store = store
        self.compressor = compressor
        self.recognizer = recognizer
        self.normalize_corners = normalize_corners

    async def run(self, session_id: str, image_data: bytes, request_id: Optional[str] = None) -> SessionState:
        """
        Process an upload and return the session state after it settles.

        Raises:
            SessionNotFoundError: unknown session id
        """
        state = self.store.apply(session_id, upload_started)
        generation = state.generation
        start_time = time.time()

        try:
            prepared = await self.compressor.prepare(image_data)
            self.store.apply_if_present(session_id, image_prepared, generation, prepared)

            payload = await self.recognizer.recognize(prepared.content)
            regions = extract_regions(payload, normalize=self.normalize_corners)
            self.store.apply_if_present(session_id, recognition_succeeded, generation, regions)

            logger.info(
                f"Upload processed for session {session_id}",
                extra={
                    'request_id': request_id,
                    'generation': generation,
                    'regions': len(regions),
                    'processing_time_ms': int((time.time() - start_time) * 1000),
                }
            )

        except MenuLensException as e:
            logger.warning(
                f"Upload failed for session {session_id}: {e.message}",
                extra={'request_id': request_id, 'error_code': e.error_code.value}
            )
            self.store.apply_if_present(session_id, recognition_failed, generation, e.message)

        except httpx.HTTPError as e:
            logger.warning(f"Upload failed for session {session_id}: {e}", extra={'request_id': request_id})
            self.store.apply_if_present(
                session_id, recognition_failed, generation, f"Text detection request failed: {e}"
            )

        finally:
            self.store.apply_if_present(session_id, upload_finished, generation)

        current = self.store.get(session_id)
        if not current.is_current(generation):
            logger.info(f"Discarded stale upload result for session {session_id} (generation {generation})")
        return current
