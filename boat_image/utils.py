"""Helpers for naming saved images."""

from __future__ import annotations

import re
from typing import Optional

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
IMAGE_SUFFIX_PATTERN = re.compile(r"\.(jpe?g|png|gif|webp)$", re.IGNORECASE)

_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/gif": "gif", "image/webp": "webp"}


def slugify(value: str, fallback: str = "image") -> str:
    """Generate a filesystem-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii").lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def image_filename(slug: Optional[str], content_type: Optional[str]) -> str:
    """Build ``<slug>.<ext>`` for a listing image, defaulting to JPEG."""
    extension = _EXTENSIONS.get((content_type or "").lower(), "jpg")
    stem = IMAGE_SUFFIX_PATTERN.sub("", slug or "")
    return f"{slugify(stem)}.{extension}"
