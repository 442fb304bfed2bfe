"""Edit session state machine and the in-memory session registry."""

import mimetypes
import time
import uuid
from typing import Callable, List, Optional, Tuple

from cachetools import TTLCache

from ..models.enums import AppStatus
from ..models.schemas import EditRequest, EditResult, SessionState, SourceImage
from ..providers.gemini import GeminiImageClient
from ..utils.data_uri import decode_data_uri, parse_data_uri
from ..utils.errors import (
    EmptyResultError,
    FileReadError,
    GenerationInProgressError,
    MalformedDataURIError,
    NoResultError,
    SessionNotFoundError,
    UnknownSuggestionError,
)
from ..utils.logger import get_logger
from .ingestion import Reader, check_image_type, ingest_file

logger = get_logger(__name__)

FALLBACK_ERROR_MESSAGE = "Something went wrong. Please try again."

DEFAULT_SESSION_TTL_SECONDS = 3600
DEFAULT_MAX_SESSIONS = 500

EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


class EditSession:
    """
    State of one page: source image, prompt, result and status.

    Status moves IDLE -> GENERATING -> SUCCESS | ERROR per submission and
    back to IDLE on the next image selection or clear. Only one generation
    may be in flight at a time.
    """

    def __init__(
        self,
        client: GeminiImageClient,
        session_id: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
        download_prefix: str = "styleswap-edited",
        clock: Callable[[], float] = time.time,
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self.client = client
        self.suggestions = list(suggestions or [])
        self.download_prefix = download_prefix
        self._clock = clock

        self.source: Optional[SourceImage] = None
        self.prompt: str = ""
        self.result: Optional[EditResult] = None
        self.status: AppStatus = AppStatus.IDLE
        self.error: Optional[str] = None
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def can_generate(self) -> bool:
        return (
            self.source is not None
            and bool(self.prompt.strip())
            and not self._in_flight
        )

    async def select_image(
        self,
        filename: Optional[str],
        content_type: Optional[str],
        read: Reader,
    ) -> Optional[SourceImage]:
        """
        Ingest a newly picked file.

        Non-image files raise InvalidFileTypeError before any state changes.
        A failed read leaves the session in ERROR and returns None.
        """
        check_image_type(content_type)

        self.status = AppStatus.UPLOADING
        try:
            return await ingest_file(filename, content_type, read, self._on_image_selected)
        except (FileReadError, MalformedDataURIError) as e:
            self.status = AppStatus.ERROR
            self.error = str(e)
            return None

    def _on_image_selected(self, source: SourceImage) -> None:
        self.source = source
        self.result = None
        self.status = AppStatus.IDLE
        self.error = None

    def set_prompt(self, prompt: str) -> None:
        self.prompt = prompt

    def apply_suggestion(self, index: int) -> str:
        if index < 0 or index >= len(self.suggestions):
            raise UnknownSuggestionError(index)
        self.prompt = self.suggestions[index]
        return self.prompt

    async def generate(self) -> bool:
        """
        Submit the current image and prompt for editing.

        Returns:
            False when there is no image or the prompt is blank (nothing is
            sent), True once a submission has finished either way

        Raises:
            GenerationInProgressError: If a generation is already running
        """
        if self.source is None or not self.prompt.strip():
            return False
        if self._in_flight:
            raise GenerationInProgressError()

        request = EditRequest(
            image_base64=self.source.base64,
            mime_type=self.source.mime_type,
            prompt=self.prompt,
        )

        self._in_flight = True
        self.status = AppStatus.GENERATING
        self.error = None
        self.result = None

        try:
            image_url = await self.client.generate_edited_image(
                request.image_base64,
                request.mime_type,
                request.prompt,
            )
            if not image_url:
                raise EmptyResultError()

            self.result = EditResult(image_url=image_url)
            self.status = AppStatus.SUCCESS
            logger.info(
                "Generation succeeded",
                extra={"session_id": self.session_id},
            )

        except Exception as e:
            self.result = None
            self.status = AppStatus.ERROR
            self.error = str(e) or FALLBACK_ERROR_MESSAGE
            logger.warning(
                f"Generation failed: {self.error}",
                extra={
                    "session_id": self.session_id,
                    "error_type": type(e).__name__,
                }
            )

        finally:
            self._in_flight = False

        return True

    def download(self) -> Tuple[bytes, str, str]:
        """
        Bytes, content type and a timestamped filename for the result.

        Raises:
            NoResultError: If nothing has been generated yet
        """
        if self.result is None:
            raise NoResultError()

        mime_type = parse_data_uri(self.result.image_url).mime_type
        content = decode_data_uri(self.result.image_url)
        extension = (
            EXTENSIONS.get(mime_type)
            or mimetypes.guess_extension(mime_type)
            or ".png"
        )
        filename = f"{self.download_prefix}-{int(self._clock() * 1000)}{extension}"
        return content, mime_type, filename

    def clear(self) -> None:
        """Drop image, prompt and result together."""
        self.source = None
        self.prompt = ""
        self.result = None
        self.status = AppStatus.IDLE
        self.error = None

    def state(self) -> SessionState:
        return SessionState(
            session_id=self.session_id,
            status=self.status,
            prompt=self.prompt,
            prompt_length=len(self.prompt),
            source_filename=self.source.filename if self.source else None,
            source_preview_url=self.source.preview_url if self.source else None,
            result_image_url=self.result.image_url if self.result else None,
            error=self.error,
            can_generate=self.can_generate,
        )


class SessionStore:
    """
    In-memory registry of edit sessions, keyed by id.

    Sessions idle for longer than ``ttl_seconds`` are evicted, and at most
    ``max_sessions`` are held; reading a session refreshes its lifetime.
    """

    def __init__(
        self,
        client: GeminiImageClient,
        suggestions: Optional[List[str]] = None,
        download_prefix: str = "styleswap-edited",
        ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.suggestions = list(suggestions or [])
        self.download_prefix = download_prefix
        self._sessions: TTLCache = TTLCache(maxsize=max_sessions, ttl=ttl_seconds, timer=timer)

    def __len__(self) -> int:
        self._sessions.expire()
        return len(self._sessions)

    def create(self) -> EditSession:
        session = EditSession(
            client=self.client,
            suggestions=self.suggestions,
            download_prefix=self.download_prefix,
        )
        self._sessions[session.session_id] = session
        logger.info(
            "Session created",
            extra={"session_id": session.session_id, "sessions_held": len(self._sessions)},
        )
        return session

    def get(self, session_id: str) -> EditSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        # re-insert to restart the idle clock
        self._sessions[session_id] = session
        return session

    def drop(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        logger.info("Session dropped", extra={"session_id": session_id})
