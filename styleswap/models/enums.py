"""Enumerations for StyleSwap."""

from enum import Enum


class AppStatus(str, Enum):
    """Status of an edit session; drives what the page renders."""
    IDLE = "idle"
    UPLOADING = "uploading"
    GENERATING = "generating"
    SUCCESS = "success"
    ERROR = "error"
