# -*- coding: utf-8 -*-
"""Testes da foto de perfil."""

import io

from PIL import Image

from config import PHOTO_B64_MAX, PHOTO_HEIGHT, PHOTO_WIDTH
from photo_utils import (
    DATA_URL_PREFIX,
    compress_to_base64,
    data_url_to_bytes,
    photo_to_data_url,
    resize_photo_to_final,
)


def _png_bytes(size=(800, 600), mode="RGBA"):
    out = io.BytesIO()
    Image.new(mode, size, (200, 30, 30, 255) if mode == "RGBA" else (200, 30, 30)).save(out, format="PNG")
    return out.getvalue()


class TestResize:

    def test_fixed_size_jpeg(self):
        data = resize_photo_to_final(Image.new("RGBA", (300, 500)))
        img = Image.open(io.BytesIO(data))
        assert img.format == "JPEG"
        assert img.size == (PHOTO_WIDTH, PHOTO_HEIGHT)

    def test_none(self):
        assert resize_photo_to_final(None) == b""


class TestDataUrl:
    """Foto gravada como data URL."""

    def test_photo_to_data_url(self):
        url = photo_to_data_url(_png_bytes())
        assert url.startswith(DATA_URL_PREFIX)
        assert len(url) - len(DATA_URL_PREFIX) <= PHOTO_B64_MAX
        img = Image.open(io.BytesIO(data_url_to_bytes(url)))
        assert img.format == "JPEG"
        assert max(img.size) <= 320

    def test_unreadable_image(self):
        assert compress_to_base64(b"not an image") == ""
        assert photo_to_data_url(b"not an image") == ""
        assert photo_to_data_url(b"") == ""

    def test_data_url_to_bytes_rejects_other_values(self):
        assert data_url_to_bytes("") is None
        assert data_url_to_bytes("https://example.com/a.jpg") is None
        assert data_url_to_bytes("data:image/jpeg;base64,@@@") is None
