# -*- coding: utf-8 -*-
"""Foto de perfil: recorte 3:4, compressão e data URL (cabe numa célula da planilha)."""

import base64
import binascii
import io
import logging

from PIL import Image

from config import PHOTO_B64_MAX, PHOTO_HEIGHT, PHOTO_WIDTH

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/jpeg;base64,"


def resize_photo_to_final(pil_img: "Image.Image") -> bytes:
    """Redimensiona a imagem PIL para o tamanho fixo (3:4) e devolve bytes JPEG."""
    if pil_img is None:
        return b""
    try:
        if pil_img.mode in ("RGBA", "P"):
            pil_img = pil_img.convert("RGB")
        img = pil_img.resize((PHOTO_WIDTH, PHOTO_HEIGHT), Image.Resampling.LANCZOS)
        out = io.BytesIO()
        img.save(out, format="JPEG", quality=85, optimize=True)
        return out.getvalue()
    except (OSError, ValueError) as exc:
        logger.warning("could not resize photo: %s", exc)
        return b""


def compress_to_base64(image_bytes: bytes) -> str:
    """Reduz e comprime até o base64 caber em PHOTO_B64_MAX. Imagem ilegível -> ""."""
    if not image_bytes:
        return ""
    try:
        img = Image.open(io.BytesIO(image_bytes))
        if img.mode in ("RGBA", "P", "LA"):
            img = img.convert("RGB")
        out = io.BytesIO()
        max_side = 320
        quality = 72
        for _ in range(6):
            w, h = img.size
            if max(w, h) > max_side:
                ratio = max_side / max(w, h)
                img = img.resize((int(w * ratio), int(h * ratio)), Image.Resampling.LANCZOS)
            img.save(out, format="JPEG", quality=quality, optimize=True)
            b64 = base64.b64encode(out.getvalue()).decode("ascii")
            if len(b64) <= PHOTO_B64_MAX:
                return b64
            out.seek(0)
            out.truncate(0)
            max_side = int(max_side * 0.8)
            quality = max(50, quality - 8)
        # ainda grande demais: truncar corromperia o JPEG
        logger.warning("photo still over %d chars after compression, dropped", PHOTO_B64_MAX)
        return ""
    except (OSError, ValueError) as exc:
        logger.warning("could not read uploaded photo: %s", exc)
        return ""


def photo_to_data_url(image_bytes: bytes) -> str:
    """Bytes da foto -> referência gravável no registro ("" se não houver foto)."""
    b64 = compress_to_base64(image_bytes)
    return DATA_URL_PREFIX + b64 if b64 else ""


def data_url_to_bytes(url: str) -> bytes | None:
    """Bytes de uma data URL gravada; None para URLs http ou valores inválidos."""
    if not url or not url.startswith("data:") or "," not in url:
        return None
    try:
        return base64.b64decode(url.split(",", 1)[1], validate=True)
    except (binascii.Error, ValueError):
        return None
