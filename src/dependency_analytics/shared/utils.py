from __future__ import annotations

from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

from ..core.domain.models import Position


def file_name_from_uri(uri: str) -> str:
    """Return the base name of a document URI or plain path.

    >>> file_name_from_uri("file:///home/me/project/package.json")
    'package.json'
    """
    parsed = urlparse(uri)
    path = unquote(parsed.path) if parsed.scheme else uri
    return PurePosixPath(path.replace("\\", "/")).name


def position_at(text: str, offset: int) -> Position:
    """0-based line/character of a character offset in text."""
    line = text.count("\n", 0, offset)
    line_start = text.rfind("\n", 0, offset) + 1
    return Position(line, offset - line_start)
