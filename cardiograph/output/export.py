"""
Image export utilities for CardioGraph.

Provides the conversions between raw image bytes and the ``data:`` URI
shown in the preview, the timestamped download filename, and saving an
infographic to disk.
"""

from __future__ import annotations

import base64
import binascii
import io
import os
import re
import time
from typing import Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

DOWNLOAD_PREFIX = "cardiograph"

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.S)


def to_data_uri(data: bytes, mime_type: str = "image/png") -> str:
    """Encode raw image bytes as a base64 ``data:`` URI."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def decode_data_uri(uri: str) -> Tuple[bytes, str]:
    """Decode a base64 ``data:`` URI.

    Returns:
        ``(raw_bytes, mime_type)``.

    Raises:
        ValueError: If ``uri`` is not a base64 data URI.
    """
    match = _DATA_URI_RE.match(uri or "")
    if not match:
        raise ValueError("Not a base64 data URI")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload in data URI: {e}") from e
    return data, match.group("mime")


def download_filename(timestamp_ms: Optional[int] = None) -> str:
    """Filename for a downloaded infographic, e.g. ``cardiograph-1700000000000.png``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{DOWNLOAD_PREFIX}-{timestamp_ms}.png"


def image_size(data: bytes) -> Optional[Tuple[int, int]]:
    """Return ``(width, height)`` of an encoded image, or None if unreadable."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.size
    except UnidentifiedImageError:
        return None


def save_image(
    image: Union[bytes, str],
    output_dir: str,
    filename: Optional[str] = None,
) -> str:
    """Write an infographic to disk.

    Parameters:
        image: Raw image bytes or a ``data:`` URI.
        output_dir: Destination directory (created if missing).
        filename: File name; defaults to :func:`download_filename`.

    Returns:
        The absolute path of the saved file.
    """
    if isinstance(image, str):
        image, _ = decode_data_uri(image)

    os.makedirs(output_dir, exist_ok=True)
    filepath = os.path.abspath(os.path.join(output_dir, filename or download_filename()))

    with open(filepath, "wb") as f:
        f.write(image)

    size = image_size(image)
    size_kb = len(image) / 1024
    dims = f"{size[0]}x{size[1]}, " if size else ""
    print(f"[CardioGraph] Infographic saved to {filepath} ({dims}{size_kb:.1f} KB)")

    return filepath
