"""Edit session routes driven by the single-page client."""

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile

from ..core.editor import EditSession, SessionStore
from ..models.schemas import PromptUpdate, SessionState, SuggestionList
from ..utils.errors import (
    GenerationInProgressError,
    InvalidFileTypeError,
    MalformedDataURIError,
    NoResultError,
    SessionNotFoundError,
    UnknownSuggestionError,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def get_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_session(session_id: str, store: SessionStore = Depends(get_store)) -> EditSession:
    try:
        return store.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/suggestions", response_model=SuggestionList)
async def list_suggestions(store: SessionStore = Depends(get_store)):
    """Prompt ideas shown under the prompt box."""
    return SuggestionList(suggestions=store.suggestions)


@router.post("/sessions", response_model=SessionState, status_code=201)
async def create_session(store: SessionStore = Depends(get_store)):
    """Start a new page session."""
    return store.create().state()


@router.get("/sessions/{session_id}", response_model=SessionState)
async def read_session(session: EditSession = Depends(get_session)):
    return session.state()


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str, store: SessionStore = Depends(get_store)):
    try:
        store.drop(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@router.post("/sessions/{session_id}/image", response_model=SessionState)
async def upload_image(
    file: UploadFile = File(...),
    session: EditSession = Depends(get_session),
):
    """
    Replace the session's source image.

    Non-image uploads are refused with 415 and leave the session untouched.
    """
    try:
        await session.select_image(file.filename, file.content_type, file.read)
    except InvalidFileTypeError as e:
        raise HTTPException(status_code=415, detail=str(e))
    finally:
        await file.close()
    return session.state()


@router.delete("/sessions/{session_id}/image", response_model=SessionState)
async def clear_image(session: EditSession = Depends(get_session)):
    """Reset image, prompt and result."""
    session.clear()
    return session.state()


@router.put("/sessions/{session_id}/prompt", response_model=SessionState)
async def update_prompt(body: PromptUpdate, session: EditSession = Depends(get_session)):
    session.set_prompt(body.prompt)
    return session.state()


@router.post("/sessions/{session_id}/suggestions/{index}", response_model=SessionState)
async def apply_suggestion(index: int, session: EditSession = Depends(get_session)):
    try:
        session.apply_suggestion(index)
    except UnknownSuggestionError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return session.state()


@router.post("/sessions/{session_id}/generate", response_model=SessionState)
async def generate(session: EditSession = Depends(get_session)):
    """
    Run one edit. Success and failure both answer 200; the status says which.

    Missing image or blank prompt is a no-op.
    """
    try:
        await session.generate()
    except GenerationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return session.state()


@router.get("/sessions/{session_id}/download")
async def download(session: EditSession = Depends(get_session)):
    """Generated image as a file download."""
    try:
        content, mime_type, filename = session.download()
    except NoResultError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except MalformedDataURIError as e:
        logger.error(f"Generated image is not decodable: {e}", extra={"session_id": session.session_id})
        raise HTTPException(status_code=502, detail="Generated image data is corrupt.")

    return Response(
        content=content,
        media_type=mime_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
