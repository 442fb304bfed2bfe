"""API provider clients for external services."""

from .gemini import GeminiImageClient

__all__ = [
    "GeminiImageClient",
]
