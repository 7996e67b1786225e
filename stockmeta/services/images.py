# stockmeta/services/images.py
from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Optional

from stockmeta.core.errors import InvalidInput, PayloadTooLarge

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?;base64,", re.IGNORECASE)

# base64 開頭特徵 → mime
_MAGIC_PREFIXES = (
    ("/9j/", "image/jpeg"),
    ("iVBORw0KGgo", "image/png"),
    ("R0lGOD", "image/gif"),
    ("UklGR", "image/webp"),
)
DEFAULT_MIME = "image/jpeg"


@dataclass(frozen=True)
class PreparedImage:
    base64: str
    mime: str

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime};base64,{self.base64}"

    @property
    def size(self) -> int:
        return len(self.base64)


def sniff_mime(b64: str) -> str:
    for prefix, mime in _MAGIC_PREFIXES:
        if b64.startswith(prefix):
            return mime
    return DEFAULT_MIME


def prepare_image(image_base64: Optional[str], max_chars: int) -> PreparedImage:
    """
    影像前置檢查（長度、前綴與 base64 格式）：
      - 空值 → InvalidInput
      - 超過 max_chars → PayloadTooLarge (413)
      - 不是合法 base64 → InvalidInput
    """
    raw = (image_base64 or "").strip()
    if not raw:
        raise InvalidInput("Missing imageBase64")

    mime = None
    m = _DATA_URI_RE.match(raw)
    if m:
        mime = m.group("mime")
        raw = raw[m.end():]
        if not raw:
            raise InvalidInput("Missing imageBase64")

    if len(raw) > max_chars:
        raise PayloadTooLarge("Please upload images under ~8MB each.")

    # 換行分段的 base64 也接受
    raw = "".join(raw.split())
    try:
        base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidInput("Invalid base64 image")

    return PreparedImage(base64=raw, mime=(mime or sniff_mime(raw)).lower())
