from __future__ import annotations

import hashlib


def manifest_hash(uri: str) -> str:
    """Stable identifier for a manifest, sent as the utm_content query parameter.

    Uses SHA-256 over the document URI so the same file always maps to the same
    value while the path itself never leaves the machine.

    Example:
        >>> len(manifest_hash("file:///project/package.json"))
        64
    """
    return hashlib.sha256(uri.encode("utf-8")).hexdigest()
