"""Turn an uploaded file into a SourceImage ready for editing."""

from typing import Awaitable, Callable, Optional

from ..models.schemas import SourceImage
from ..utils.data_uri import build_data_uri, bytes_to_base64, parse_data_uri
from ..utils.errors import FileReadError, InvalidFileTypeError
from ..utils.logger import get_logger

logger = get_logger(__name__)

Reader = Callable[[], Awaitable[bytes]]
OnReady = Callable[[SourceImage], None]


def is_image_type(content_type: Optional[str]) -> bool:
    """True if the declared content type belongs to the image category."""
    return bool(content_type) and content_type.lower().startswith("image/")


def check_image_type(content_type: Optional[str]) -> None:
    """
    Reject non-image uploads before anything is read.

    Raises:
        InvalidFileTypeError: Carries the notice shown to the user
    """
    if not is_image_type(content_type):
        logger.info(
            "Rejected non-image upload",
            extra={"content_type": content_type},
        )
        raise InvalidFileTypeError(content_type)


async def ingest_file(
    filename: Optional[str],
    content_type: Optional[str],
    read: Reader,
    on_ready: OnReady,
) -> SourceImage:
    """
    Read an uploaded image and hand the assembled SourceImage to on_ready.

    The callback runs only after the whole file has been read. A rejected
    or unreadable file never reaches it.

    Args:
        filename: Original filename, kept for display
        content_type: Declared content type of the upload
        read: Coroutine function returning the full file contents
        on_ready: Called with the SourceImage once the read completes

    Returns:
        The SourceImage passed to on_ready

    Raises:
        InvalidFileTypeError: If the declared type is not image/*
        FileReadError: If the file cannot be read or is empty
    """
    check_image_type(content_type)

    try:
        contents = await read()
    except Exception as e:
        logger.error(
            f"Failed to read upload: {e}",
            extra={"upload_filename": filename},
        )
        raise FileReadError(f"Could not read {filename or 'file'}: {e}") from e

    if not contents:
        raise FileReadError("Uploaded file is empty.")

    # "Image/PNG; name=x" -> "image/png"
    mime_type = content_type.split(";", 1)[0].strip().lower()
    data_uri = build_data_uri(mime_type, bytes_to_base64(contents))
    parsed = parse_data_uri(data_uri)

    source = SourceImage(
        filename=filename,
        base64=parsed.data,
        mime_type=parsed.mime_type,
    )

    logger.info(
        "Image ingested",
        extra={
            "upload_filename": filename,
            "mime_type": source.mime_type,
            "size_bytes": len(contents),
        }
    )

    on_ready(source)
    return source
