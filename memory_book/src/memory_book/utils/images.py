"""Resolve shareable image links into directly embeddable image URLs."""

import re
from typing import Optional

from ..config import get_settings

# Hosted file identifiers are long opaque runs of ASCII word characters and hyphens
FILE_ID_PATTERN = re.compile(r"[-\w]{25,}", re.ASCII)


def extract_file_id(ref: Optional[str]) -> Optional[str]:
    """
    Extract the hosted file identifier from a raw image reference.

    Args:
        ref: Shareable link (or bare identifier) to an externally hosted file

    Returns:
        The longest run of at least 25 word characters/hyphens, or None
    """
    if not ref:
        return None

    candidates = FILE_ID_PATTERN.findall(ref)
    if not candidates:
        return None

    return max(candidates, key=len)


def resolve_image_url(
    ref: Optional[str],
    host: Optional[str] = None,
    width: Optional[int] = None
) -> Optional[str]:
    """
    Rewrite a raw image reference into a direct-view image URL.

    No request is made; broken or private files surface when the image is
    rendered.

    Args:
        ref: Raw image reference
        host: Image host override (defaults to settings.image_host)
        width: Width parameter override (defaults to settings.image_width)

    Returns:
        The direct image URL, or None when no file identifier is found
    """
    file_id = extract_file_id(ref)
    if file_id is None:
        return None

    if host is None or width is None:
        settings = get_settings()
        host = host or settings.image_host
        width = width or settings.image_width

    return f"https://{host}/d/{file_id}=w{width}"
