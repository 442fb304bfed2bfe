"""Core business logic components."""

from .ingestion import ingest_file, is_image_type
from .editor import EditSession, SessionStore

__all__ = [
    "ingest_file",
    "is_image_type",
    "EditSession",
    "SessionStore",
]
