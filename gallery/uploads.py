"""
Helpers for turning an uploaded file into an inline image record URL.
"""

from __future__ import annotations

import base64
import re
from typing import BinaryIO, Callable, Optional

CHUNK_SIZE = 64 * 1024
EXTENSION_PATTERN = re.compile(r"\.[^/.]+$")

ProgressCallback = Callable[[int], None]


def title_from_filename(filename: str) -> str:
    """Drop the last extension: ``sunset.jpg`` -> ``sunset``."""
    return EXTENSION_PATTERN.sub("", filename or "")


def read_as_data_url(
    stream: BinaryIO,
    content_type: Optional[str],
    *,
    size: Optional[int] = None,
    on_progress: Optional[ProgressCallback] = None,
    chunk_size: int = CHUNK_SIZE,
) -> str:
    """
    Read ``stream`` to the end and return it as a base64 ``data:`` URI.

    ``on_progress`` receives whole percentages as chunks arrive; it is only
    called when ``size`` is known.
    """
    chunks: list[bytes] = []
    loaded = 0
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        chunks.append(chunk)
        loaded += len(chunk)
        if on_progress and size:
            on_progress(min(100, round(loaded / size * 100)))

    encoded = base64.b64encode(b"".join(chunks)).decode("ascii")
    mime = content_type or "application/octet-stream"
    return f"data:{mime};base64,{encoded}"
