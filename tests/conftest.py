"""Shared fixtures for collage tests."""

import struct
import zlib
from pathlib import Path

import pytest
from PIL import Image

from models import Color, ColoredItem, CoverTags


@pytest.fixture
def make_image():
    """Write a solid-color image, optionally with a patch of a second color."""

    def _make(path: Path, color, size=(16, 16), patch=None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        img = Image.new('RGB', size, tuple(color))
        if patch is not None:
            patch_color, box = patch
            img.paste(tuple(patch_color), box)
        img.save(path)
        return path

    return _make


@pytest.fixture
def make_item():
    def _make(file: str, rgb=(0, 0, 0), date=None, **tags) -> ColoredItem:
        return ColoredItem(file=file, color=Color(*rgb), tags=CoverTags(date=date, **tags))

    return _make


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack('>I', len(data)) + kind + data + struct.pack('>I', zlib.crc32(kind + data))


@pytest.fixture
def make_oversized_png():
    """Write a PNG header declaring 20000x20000 pixels, with no real pixel data."""

    def _make(path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        header = struct.pack('>IIBBBBB', 20000, 20000, 8, 2, 0, 0, 0)
        path.write_bytes(
            b'\x89PNG\r\n\x1a\n'
            + _png_chunk(b'IHDR', header)
            + _png_chunk(b'IDAT', zlib.compress(b''))
            + _png_chunk(b'IEND', b'')
        )
        return path

    return _make
