"""Repo scanner -- filters a tree listing and classifies source files."""

from __future__ import annotations

import posixpath

from .models import Language

# Directories whose contents never take part in the graph.
SKIP_DIRS: frozenset[str] = frozenset({
    ".git", ".venv", "venv", "__pycache__", "dist", ".tox",
    "node_modules", ".mypy_cache", ".pytest_cache",
    ".gradle",         # Gradle
    ".next", ".nuxt",  # Next.js / Nuxt
    "vendor",          # Go vendor, PHP
    "Pods",            # iOS CocoaPods
    ".idea", ".vscode",
})


# Extension -> language mapping.
LANGUAGE_EXTENSIONS: dict[str, Language] = {
    ".ts": Language.ecma,
    ".tsx": Language.ecma,
    ".js": Language.ecma,
    ".jsx": Language.ecma,
    ".mjs": Language.ecma,
    ".cjs": Language.ecma,
    ".mts": Language.ecma,
    ".cts": Language.ecma,
    ".java": Language.java,
    ".kt": Language.kotlin,
    ".kts": Language.kotlin,
    ".py": Language.python,
    ".go": Language.go,
    ".rb": Language.ruby,
    ".rs": Language.rust,
    ".swift": Language.swift,
    ".c": Language.c_family,
    ".cc": Language.c_family,
    ".cpp": Language.c_family,
    ".cxx": Language.c_family,
    ".h": Language.c_family,
    ".hh": Language.c_family,
    ".hpp": Language.c_family,
    ".hxx": Language.c_family,
    ".php": Language.php,
    ".dart": Language.dart,
    ".scala": Language.scala,
    ".cs": Language.csharp,
}


def detect_language(path: str) -> Language:
    """Map *path*'s extension to a :class:`Language` (``unknown`` if unsupported)."""
    ext = posixpath.splitext(path)[1].lower()
    return LANGUAGE_EXTENSIONS.get(ext, Language.unknown)


def is_analyzable(path: str) -> bool:
    return detect_language(path) is not Language.unknown


def is_excluded(path: str) -> bool:
    """True when any directory segment of *path* is in :data:`SKIP_DIRS`."""
    segments = path.split("/")[:-1]
    return any(seg in SKIP_DIRS for seg in segments)


def filter_paths(paths: list[str]) -> list[str]:
    """Drop excluded paths, keeping listing order."""
    return [p for p in paths if p and not is_excluded(p)]
