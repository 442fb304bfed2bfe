"""Gemini generateContent client for prompt-driven image edits."""

import json
from typing import Any, Dict, List, Optional
import httpx

from ..utils.data_uri import build_data_uri
from ..utils.logger import get_logger
from ..utils.errors import (
    ProviderError,
    AuthenticationError,
    RateLimitError,
    GenerationError,
    GenerationRefusedError,
)

logger = get_logger(__name__)

PROVIDER_NAME = "gemini"
DEFAULT_MODEL = "gemini-3-pro-image-preview"
DEFAULT_RESULT_MIME_TYPE = "image/png"


class GeminiImageClient:
    """Client for the Gemini image generation endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str = DEFAULT_MODEL,
        api_version: str = "v1beta",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        default_mime_type: str = DEFAULT_RESULT_MIME_TYPE,
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key
            base_url: Endpoint base address (GEMINI_BASE_URL)
            model: Model identifier to call
            api_version: Path segment before /models
            timeout: Request timeout in seconds, None for no local limit
            transport: Optional httpx transport, e.g. a MockTransport in tests
            default_mime_type: Content type used when a part omits it
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_version = api_version
        self.timeout = timeout
        self.transport = transport
        self.default_mime_type = default_mime_type
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def initialize(self):
        """Open the HTTP client; safe to call twice."""
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={
                    "x-goog-api-key": self.api_key,
                    "Content-Type": "application/json",
                },
                transport=self.transport,
            )
            logger.info("Gemini client initialized", extra={"model": self.model})

    async def close(self):
        if self.client:
            await self.client.aclose()
            self.client = None
            logger.info("Gemini client closed", extra={"model": self.model})

    def _ensure_client(self):
        if self.client is None:
            raise RuntimeError(
                "GeminiImageClient not initialized. "
                "Call initialize() or use as async context manager."
            )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.api_version}/models/{self.model}:generateContent"

    def build_payload(self, image_base64: str, mime_type: str, prompt: str) -> Dict[str, Any]:
        """Image part first, prompt second."""
        return {
            "contents": {
                "parts": [
                    {
                        "inlineData": {
                            "data": image_base64,
                            "mimeType": mime_type,
                        }
                    },
                    {
                        "text": prompt,
                    },
                ]
            }
        }

    async def generate_edited_image(
        self,
        image_base64: str,
        mime_type: str,
        prompt: str,
    ) -> Optional[str]:
        """
        Edit an image according to a text prompt.

        Sends exactly one request. Nothing is retried.

        Args:
            image_base64: Base64 payload of the source image (no data URI prefix)
            mime_type: Content type of the source image
            prompt: Description of the change

        Returns:
            Data URI of the generated image, or None when the response
            carries neither an image nor an explanation

        Raises:
            GenerationRefusedError: Model explained instead of returning an image
            GenerationError: No candidates in the response
            ProviderError: Endpoint returned an error status
            httpx.RequestError: Transport failure
        """
        self._ensure_client()

        logger.info(
            "Requesting image edit",
            extra={
                "model": self.model,
                "mime_type": mime_type,
                "image_b64_chars": len(image_base64),
                "prompt_chars": len(prompt),
            }
        )

        try:
            response = await self.client.post(
                self.endpoint,
                json=self.build_payload(image_base64, mime_type, prompt),
            )
            self._handle_response_errors(response)
            return self.extract_image(response.json())

        except Exception as e:
            logger.error(
                f"Error generating image: {e}",
                extra={"model": self.model, "error_type": type(e).__name__},
            )
            raise

    def extract_image(self, data: Dict[str, Any]) -> Optional[str]:
        """
        Pull the first inline image out of a generateContent response.

        Raises:
            GenerationError: If there are no candidates
            GenerationRefusedError: If only text came back
        """
        candidates = data.get("candidates") or []
        if not candidates:
            raise GenerationError("No candidates returned from Gemini API")

        content = candidates[0].get("content") or {}
        parts: List[Dict[str, Any]] = content.get("parts") or []

        for part in parts:
            inline = part.get("inlineData") or part.get("inline_data")
            if inline and inline.get("data"):
                result_mime_type = (
                    inline.get("mimeType")
                    or inline.get("mime_type")
                    or self.default_mime_type
                )
                logger.info(
                    "Image edit complete",
                    extra={
                        "model": self.model,
                        "result_mime_type": result_mime_type,
                        "result_b64_chars": len(inline["data"]),
                    }
                )
                return build_data_uri(result_mime_type, inline["data"])

        for part in parts:
            if part.get("text"):
                logger.warning(
                    "Model returned text instead of an image",
                    extra={"model": self.model, "text": part["text"]},
                )
                raise GenerationRefusedError(part["text"])

        logger.warning(
            "Response carried no image and no text",
            extra={"model": self.model, "parts": len(parts)},
        )
        return None

    def _handle_response_errors(self, response: httpx.Response):
        """Handle HTTP response errors."""
        if response.status_code == 401:
            raise AuthenticationError(PROVIDER_NAME)
        elif response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                PROVIDER_NAME,
                int(retry_after) if retry_after and retry_after.isdigit() else None
            )
        elif response.status_code >= 400:
            try:
                error_data = response.json()
                error_message = error_data.get("error", {}).get("message", response.text)
                logger.error(
                    f"Gemini error response:\n"
                    f"Status: {response.status_code}\n"
                    f"Error: {json.dumps(error_data, indent=2)}"
                )
            except (ValueError, AttributeError):
                error_message = response.text

            raise ProviderError(
                PROVIDER_NAME,
                error_message,
                response.status_code
            )
