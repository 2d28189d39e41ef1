"""Image file encoding for avatar/banner uploads.

Files are sent inline as base64 data URLs.
"""

import base64
import logging
import mimetypes
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

IMAGE_TYPES = frozenset({"image/png", "image/jpeg", "image/gif", "image/webp"})


def encode_file(path: str | Path) -> str:
    """Read path and return a data URL. Raises ValueError for non-image files."""
    path = Path(path).expanduser()
    mime, _ = mimetypes.guess_type(path.name)
    if mime not in IMAGE_TYPES:
        raise ValueError(f"not an image: {path.name}")
    payload = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{payload}"


class PathFilePicker:
    """File picker over paths chosen elsewhere (e.g. typed into an input).

    Unreadable or non-image paths are logged and skipped.
    """

    def __init__(self, paths: Iterable[str] = ()) -> None:
        self._paths: tuple[str, ...] = tuple(paths)

    def select(self, *paths: str) -> None:
        self._paths = paths

    def pick(self) -> list[str]:
        payloads = []
        for raw in self._paths:
            if not raw or not raw.strip():
                continue
            try:
                payloads.append(encode_file(raw.strip()))
            except (OSError, ValueError) as e:
                logger.warning("skipping %s: %s", raw, e)
        return payloads
