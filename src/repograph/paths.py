"""Path sanitising for values that leave the service.

Paths flow from the tree listing into node ids, URLs and follow-up content
requests. ``safe_path`` normalises separators and dot segments and undoes
accidental duplication such as ``a/b/a/b/c``.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

_SLASHES = re.compile(r"/+")


def normalize_path(raw_path: str) -> str:
    """Forward slashes, no empty / ``.`` segments, ``..`` resolved (clamped at root)."""
    if not raw_path:
        return ""
    p = _SLASHES.sub("/", raw_path.replace("\\", "/")).strip("/")
    resolved: list[str] = []
    for seg in p.split("/"):
        if seg in ("", "."):
            continue
        if seg == "..":
            if resolved:
                resolved.pop()
        else:
            resolved.append(seg)
    return "/".join(resolved)


def detect_duplication(file_path: str) -> str | None:
    """Return the de-duplicated path if a leading run of segments repeats, else None.

    ``assets/img/assets/img/x.png`` -> ``assets/img/x.png``.
    """
    if not file_path:
        return None
    segments = file_path.split("/")
    for prefix_len in range(2, len(segments) // 2 + 1):
        prefix = segments[:prefix_len]
        if segments[prefix_len: 2 * prefix_len] == prefix:
            return "/".join(prefix + segments[2 * prefix_len:])
    return None


def safe_path(raw_path: str) -> str:
    """Normalise *raw_path* and remove any detected duplication."""
    normalized = normalize_path(raw_path)
    if not normalized:
        return ""
    deduped = detect_duplication(normalized)
    if deduped is not None:
        logger.debug("Duplicated path fixed: %r -> %r", normalized, deduped)
        return deduped
    return normalized
