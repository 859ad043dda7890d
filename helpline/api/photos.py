"""Photo gallery listing."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import quote

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp", ".avif"})


def list_photos(photos_dir: Path, url_prefix: str = "/photos") -> list[str]:
    """Return URLs for the image files in photos_dir, sorted by file name.

    An unreadable or missing directory yields an empty gallery.
    """
    try:
        names = sorted(
            entry.name
            for entry in photos_dir.iterdir()
            if entry.is_file() and entry.suffix.lower() in IMAGE_EXTENSIONS
        )
    except OSError as exc:
        logger.warning("Cannot read photo directory %s: %s", photos_dir, exc)
        return []
    return [f"{url_prefix}/{quote(name, safe='')}" for name in names]
