"""Folder identifier extraction from shared-folder URLs."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# Tried in order; the first capturing match wins.
FOLDER_URL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"/folders/([a-zA-Z0-9_-]+)"),
    re.compile(r"[?&]id=([a-zA-Z0-9_-]+)"),
    re.compile(r"/drive/folders/([a-zA-Z0-9_-]+)"),
    re.compile(r"/open\?id=([a-zA-Z0-9_-]+)"),
)


def extract_folder_id(url: str) -> str | None:
    """Return the folder identifier embedded in a shared-folder URL.

    Accepts the ``/folders/<id>``, ``?id=<id>`` / ``&id=<id>``,
    ``/drive/folders/<id>`` and ``/open?id=<id>`` shapes.

    Args:
        url: Free-form folder URL as typed or pasted by the user.

    Returns:
        The folder identifier, or None if no known URL shape matches.
    """
    for pattern in FOLDER_URL_PATTERNS:
        match = pattern.search(url)
        if match and match.group(1):
            return match.group(1)
    logger.warning("[extract_folder_id] could not extract folder id; url:%s", url)
    return None
