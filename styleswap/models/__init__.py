"""Data models and schemas for StyleSwap."""

from .schemas import (
    DataURI,
    SourceImage,
    EditRequest,
    EditResult,
    SessionState,
    PromptUpdate,
    SuggestionList,
)
from .enums import AppStatus

__all__ = [
    "DataURI",
    "SourceImage",
    "EditRequest",
    "EditResult",
    "SessionState",
    "PromptUpdate",
    "SuggestionList",
    "AppStatus",
]
