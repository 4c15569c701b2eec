"""Importance ranker -- picks the files worth fetching on large repositories."""

from __future__ import annotations

import posixpath
import re

from .scanner import is_analyzable

MAX_ANALYZED_FILES = 120

# Basenames (without extension) that conventionally mark an entry point.
ENTRYPOINT_STEMS: frozenset[str] = frozenset({
    "index", "main", "app", "server", "program", "application",
    "page", "layout", "route", "_app", "_document", "root",
})
# Exact basenames that mark an entry point regardless of the stem rule.
ENTRYPOINT_NAMES: frozenset[str] = frozenset({
    "__init__.py", "__main__.py", "mod.rs", "lib.rs", "main.rs",
    "Program.cs", "AppDelegate.swift", "manage.py", "wsgi.py", "asgi.py",
})

IMPORTANT_DIRS: frozenset[str] = frozenset({"src", "lib", "app", "components", "core"})

_TEST_RE = re.compile(
    r"(?:^|/)(?:tests?|__tests__|specs?|__mocks__|testing)/"
    r"|\.(?:test|spec)\.\w+$"
    r"|(?:^|/)test_[^/]+\.py$"
    r"|_test\.(?:py|go|rb|dart)$"
    r"|(?:Test|Tests|Spec)\.(?:java|kt|scala|cs|swift)$"
)

_CONFIG_RE = re.compile(
    r"\.d\.[mc]?ts$"
    r"|\.config\.\w+$"
    r"|(?:^|/)\.?\w*rc\.[cm]?js$"
    r"|\.min\.js$"
    r"|(?:^|/)(?:generated|__generated__|gen|migrations)/"
    r"|\.(?:generated|g|pb|pb\.gw)\.\w+$"
    r"|_pb2(?:_grpc)?\.py$"
    r"|(?:^|/)(?:setup|conftest|noxfile)\.py$"
    r"|(?:^|/)(?:build\.gradle\.kts|settings\.gradle\.kts)$"
)


def path_depth(path: str) -> int:
    """Number of directories above the file (``a.py`` -> 0, ``src/a.py`` -> 1)."""
    return path.count("/")


def is_entrypoint(path: str) -> bool:
    name = posixpath.basename(path)
    if name in ENTRYPOINT_NAMES:
        return True
    stem = name.split(".", 1)[0]
    return stem in ENTRYPOINT_STEMS


def is_test_path(path: str) -> bool:
    return bool(_TEST_RE.search(path))


def is_config_path(path: str) -> bool:
    """Config, generated code and type declarations."""
    return bool(_CONFIG_RE.search(path))


def score_path(path: str) -> int:
    score = 100 - 5 * path_depth(path)
    if is_entrypoint(path):
        score += 30
    if any(seg in IMPORTANT_DIRS for seg in path.split("/")[:-1]):
        score += 15
    if is_test_path(path):
        score -= 20
    if is_config_path(path):
        score -= 30
    return score


def rank_files(paths: list[str], limit: int = MAX_ANALYZED_FILES) -> list[str]:
    """Return the top *limit* analyzable paths by descending score.

    Ties keep their listing order (``sorted`` is stable).
    """
    candidates = [p for p in paths if is_analyzable(p)]
    ranked = sorted(candidates, key=score_path, reverse=True)
    return ranked[: max(0, limit)]
