"""Helpers for self-describing base64 data URIs."""

import base64
import binascii
import re

from ..models.schemas import DataURI
from .errors import MalformedDataURIError

# "data:image/png;base64" -> "image/png"
_HEADER_PATTERN = re.compile(r"^data:([^;,]+);base64$")


def parse_data_uri(value: str) -> DataURI:
    """
    Split a data URI into its content type and base64 payload.

    Args:
        value: String of the form ``data:<type>;base64,<payload>``

    Returns:
        DataURI with ``mime_type`` and ``data``

    Raises:
        MalformedDataURIError: If the header or payload is missing
    """
    if not isinstance(value, str) or "," not in value:
        raise MalformedDataURIError("Data URI has no ',' separator")

    header, data = value.split(",", 1)
    match = _HEADER_PATTERN.match(header)
    if match is None:
        raise MalformedDataURIError(f"Unrecognised data URI header: {header[:60]}")

    if not data:
        raise MalformedDataURIError("Data URI has an empty payload")

    return DataURI(mime_type=match.group(1), data=data)


def build_data_uri(mime_type: str, data: str) -> str:
    """Render a content type and base64 payload as a data URI."""
    return DataURI(mime_type=mime_type, data=data).render()


def bytes_to_base64(image_bytes: bytes) -> str:
    """Convert raw bytes to a base64 string."""
    return base64.b64encode(image_bytes).decode('utf-8')


def decode_data_uri(value: str) -> bytes:
    """
    Decode the payload of a data URI back to raw bytes.

    Raises:
        MalformedDataURIError: If the URI or its base64 payload is invalid
    """
    parsed = parse_data_uri(value)
    try:
        return base64.b64decode(parsed.data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedDataURIError(f"Invalid base64 payload: {e}")
