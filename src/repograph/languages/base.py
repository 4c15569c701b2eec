"""Base protocol and shared helpers for per-language strategies.

A strategy bundles the three heuristics the graph builder needs for one
language: pulling raw specifiers out of file text, deciding whether a
specifier names something outside the repository, and resolving an
internal specifier to a concrete repository path.

Extraction is a single regex pass over the whole text. It is not a parser:
matches inside comments and string literals are kept.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Iterable, Mapping, Sequence
from functools import cached_property
from typing import Protocol, runtime_checkable

from ..models import Language


# --------------------------------------------------------------------------
# File index
# --------------------------------------------------------------------------

class FileIndex:
    """All repository file paths, in tree listing order, plus lookups.

    Listing order matters: every "first match" below follows it.
    """

    def __init__(
        self,
        paths: Sequence[str],
        path_set: frozenset[str] | set[str] | None = None,
        go_modules: Mapping[str, str] | None = None,
    ) -> None:
        self.paths: list[str] = list(paths)
        self.path_set: frozenset[str] = (
            frozenset(path_set) if path_set is not None else frozenset(self.paths)
        )
        # Go module path -> directory holding its go.mod ("" for the root).
        self.go_modules: dict[str, str] = dict(go_modules or {})

    def __contains__(self, path: object) -> bool:
        return path in self.path_set

    def __len__(self) -> int:
        return len(self.paths)

    @cached_property
    def by_directory(self) -> dict[str, list[str]]:
        """Directory -> files directly inside it (root is ``""``)."""
        out: dict[str, list[str]] = {}
        for p in self.paths:
            out.setdefault(posixpath.dirname(p), []).append(p)
        return out

    def first(self, candidates: Iterable[str]) -> str | None:
        """Return the first candidate that is an exact member."""
        for c in candidates:
            if c and c in self.path_set:
                return c
        return None

    def first_with_suffix(self, suffix: str) -> str | None:
        """First path equal to *suffix* or ending in ``/`` + *suffix*."""
        if not suffix:
            return None
        tail = "/" + suffix
        for p in self.paths:
            if p == suffix or p.endswith(tail):
                return p
        return None

    def directories_with_suffix(self, dir_suffix: str) -> list[str]:
        """Directories equal to *dir_suffix* or ending in ``/`` + *dir_suffix*."""
        if not dir_suffix:
            return []
        tail = "/" + dir_suffix
        return [d for d in self.by_directory if d == dir_suffix or d.endswith(tail)]

    def files_in(self, directory: str, extensions: Sequence[str]) -> list[str]:
        return [
            p for p in self.by_directory.get(directory, [])
            if p.lower().endswith(tuple(extensions))
        ]


# --------------------------------------------------------------------------
# Path helpers
# --------------------------------------------------------------------------

def normalize(path: str) -> str | None:
    """Collapse ``.``/``..`` segments. Returns None if the path escapes the root."""
    if not path:
        return ""
    norm = posixpath.normpath(path)
    if norm == ".":
        return ""
    if norm == ".." or norm.startswith("../") or norm.startswith("/"):
        return None
    return norm


def join_relative(importer_path: str, specifier: str) -> str | None:
    """Join *specifier* onto the directory of *importer_path* and normalise."""
    return normalize(posixpath.join(posixpath.dirname(importer_path), specifier))


def with_extensions(base: str, extensions: Sequence[str]) -> list[str]:
    return [base + ext for ext in extensions]


def index_files(base: str, stem: str, extensions: Sequence[str]) -> list[str]:
    prefix = f"{base}/" if base else ""
    return [f"{prefix}{stem}{ext}" for ext in extensions]


def trailing_suffixes(segments: Sequence[str], minimum: int = 1) -> list[str]:
    """``a/b/c`` -> ``["a/b/c", "b/c", "c"]`` (longest first)."""
    return [
        "/".join(segments[i:])
        for i in range(0, max(0, len(segments) - minimum + 1))
    ]


# --------------------------------------------------------------------------
# Strategy protocol
# --------------------------------------------------------------------------

@runtime_checkable
class LanguageStrategy(Protocol):
    """Interface that every language strategy must satisfy."""

    language: Language

    def extract(self, text: str) -> list[str]:
        """Return raw specifiers found in *text*, in order, duplicates kept."""
        ...

    def is_external(self, specifier: str) -> bool:
        """True when *specifier* names a stdlib / third-party dependency."""
        ...

    def resolve(self, specifier: str, importer_path: str, files: FileIndex) -> str | None:
        """Resolve a local *specifier* to a member of *files*, or None."""
        ...


class RegexStrategy:
    """Shared regex-driven extraction.

    Subclasses list their compiled ``patterns``; each pattern's first group is
    the raw specifier. ``EXTERNAL`` is an optional allow-list regex matched
    against the specifier.
    """

    language: Language = Language.unknown
    patterns: tuple[re.Pattern[str], ...] = ()
    EXTERNAL: re.Pattern[str] | None = None

    def extract(self, text: str) -> list[str]:
        found: list[tuple[int, str]] = []
        for pattern in self.patterns:
            for m in pattern.finditer(text):
                for spec in self.clean(m):
                    found.append((m.start(), spec))
        # Preserve per-pattern order when patterns interleave in the source.
        found.sort(key=lambda item: item[0])
        return [spec for _, spec in found]

    def clean(self, match: re.Match[str]) -> list[str]:
        value = (match.group(1) or "").strip()
        return [value] if value else []

    def is_external(self, specifier: str) -> bool:
        if self.EXTERNAL is None:
            return False
        return bool(self.EXTERNAL.match(specifier))

    def resolve(self, specifier: str, importer_path: str, files: FileIndex) -> str | None:
        return None


def dotted_allow_list(*prefixes: str) -> re.Pattern[str]:
    """Compile ``^(p1|p2|...)(\\.|$)`` for dotted namespace prefixes."""
    alternatives = "|".join(re.escape(p) for p in prefixes)
    return re.compile(rf"^(?:{alternatives})(?:\.|$)")
