"""Custom exception classes for StyleSwap."""


class StyleSwapError(Exception):
    """Base exception for all StyleSwap errors."""
    pass


class ConfigurationError(StyleSwapError):
    """Configuration or initialization errors."""
    pass


class APIError(StyleSwapError):
    """Base class for API-related errors."""
    pass


class ProviderError(APIError):
    """Generic provider API error with status code."""

    def __init__(self, provider: str, message: str, status_code: int = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"{provider} error: {message}")


class AuthenticationError(ProviderError):
    """API authentication failed."""

    def __init__(self, provider: str):
        super().__init__(provider, "Authentication failed", 401)


class RateLimitError(ProviderError):
    """API rate limit exceeded."""

    def __init__(self, provider: str, retry_after: int = None):
        self.retry_after = retry_after
        message = "Rate limit exceeded"
        if retry_after:
            message += f", retry after {retry_after}s"
        super().__init__(provider, message, 429)


class GenerationError(StyleSwapError):
    """Errors during image generation."""
    pass


class GenerationRefusedError(GenerationError):
    """Model answered with an explanation instead of an image."""

    def __init__(self, explanation: str):
        self.explanation = explanation
        super().__init__(explanation)


class EmptyResultError(GenerationError):
    """Response carried neither an image nor an explanation."""

    def __init__(self, message: str = "Failed to generate image."):
        super().__init__(message)


class IngestionError(StyleSwapError):
    """Errors while turning an upload into a source image."""
    pass


class InvalidFileTypeError(IngestionError):
    """Uploaded file is not an image."""

    def __init__(self, content_type: str = None):
        self.content_type = content_type
        super().__init__("Please upload an image file (PNG, JPEG, WEBP).")


class FileReadError(IngestionError):
    """Uploaded file could not be read."""
    pass


class MalformedDataURIError(StyleSwapError):
    """String is not a base64 data URI."""
    pass


class SessionError(StyleSwapError):
    """Base class for edit session errors."""
    pass


class SessionNotFoundError(SessionError):
    """Unknown session id."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class GenerationInProgressError(SessionError):
    """A generation is already running for this session."""

    def __init__(self):
        super().__init__("A generation is already in progress.")


class UnknownSuggestionError(SessionError):
    """Suggestion index out of range."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"No suggestion at index {index}")


class NoResultError(SessionError):
    """There is no generated image to download."""

    def __init__(self):
        super().__init__("No generated image available.")
