"""Pydantic schemas for data validation."""

from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import datetime, timezone

from .enums import AppStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DataURI(BaseModel):
    """Content type and base64 payload of a data URI."""
    mime_type: str
    data: str

    def render(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class SourceImage(BaseModel):
    """Image the user picked, ready to be sent for editing."""
    filename: Optional[str] = None
    base64: str
    mime_type: str

    @property
    def preview_url(self) -> str:
        """Full data URI, shown on the page."""
        return DataURI(mime_type=self.mime_type, data=self.base64).render()


class EditRequest(BaseModel):
    """One submission to the generation endpoint."""
    image_base64: str
    mime_type: str
    prompt: str


class EditResult(BaseModel):
    """Generated image returned by the endpoint."""
    image_url: str  # data URI
    timestamp: datetime = Field(default_factory=_utcnow)


class SessionState(BaseModel):
    """Snapshot of an edit session as seen by the page."""
    session_id: str
    status: AppStatus
    prompt: str = ""
    prompt_length: int = 0
    source_filename: Optional[str] = None
    source_preview_url: Optional[str] = None
    result_image_url: Optional[str] = None
    error: Optional[str] = None
    can_generate: bool = False


class PromptUpdate(BaseModel):
    """Body of a prompt update."""
    prompt: str


class SuggestionList(BaseModel):
    """Prompt suggestions offered on the page."""
    suggestions: List[str] = Field(default_factory=list)
