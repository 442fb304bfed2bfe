"""Tests for turning uploads into source images."""

import base64

import pytest

from styleswap.core.ingestion import ingest_file, is_image_type
from styleswap.utils.errors import FileReadError, InvalidFileTypeError

from conftest import reader


@pytest.mark.parametrize("content_type", ["image/png", "image/jpeg", "image/webp"])
async def test_image_is_ingested(content_type, png_bytes):
    received = []

    source = await ingest_file("cat.png", content_type, reader(png_bytes), received.append)

    assert received == [source]
    assert source.mime_type == content_type
    assert source.base64
    assert base64.b64decode(source.base64) == png_bytes
    assert source.preview_url == f"data:{content_type};base64,{source.base64}"
    assert source.filename == "cat.png"


async def test_content_type_parameters_are_dropped(png_bytes):
    source = await ingest_file("cat.png", "image/png; name=cat.png", reader(png_bytes), lambda s: None)

    assert source.mime_type == "image/png"


async def test_mime_type_is_lower_cased(png_bytes):
    source = await ingest_file("cat.png", "IMAGE/JPEG", reader(png_bytes), lambda s: None)

    assert source.mime_type == "image/jpeg"
    assert source.preview_url.startswith("data:image/jpeg;base64,")


async def test_preview_is_derived_not_stored(png_bytes):
    source = await ingest_file("cat.png", "image/png", reader(png_bytes), lambda s: None)

    assert "preview_url" not in source.model_dump()
    assert source.preview_url == f"data:image/png;base64,{source.base64}"


@pytest.mark.parametrize("content_type", ["text/plain", "application/pdf", "", None])
async def test_non_image_is_rejected_without_callback(content_type):
    received = []
    reads = []

    async def read():
        reads.append(True)
        return b"hello"

    with pytest.raises(InvalidFileTypeError) as exc_info:
        await ingest_file("notes.txt", content_type, read, received.append)

    assert str(exc_info.value) == "Please upload an image file (PNG, JPEG, WEBP)."
    assert received == []
    assert reads == []


async def test_failed_read_raises_file_read_error():
    received = []

    async def read():
        raise OSError("disk gone")

    with pytest.raises(FileReadError, match="disk gone"):
        await ingest_file("cat.png", "image/png", read, received.append)

    assert received == []


async def test_empty_file_is_a_read_error():
    with pytest.raises(FileReadError):
        await ingest_file("cat.png", "image/png", reader(b""), lambda s: None)


def test_is_image_type():
    assert is_image_type("image/gif")
    assert is_image_type("Image/PNG")
    assert not is_image_type("text/plain")
    assert not is_image_type(None)
