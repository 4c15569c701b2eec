"""Presentation metadata -- file-type, colour and purpose labels for graph nodes.

Everything here is derived from the path and the final degrees only; it is
computed after graph membership is settled and never feeds back into it.
"""

from __future__ import annotations

import posixpath

from .ranker import is_entrypoint, is_test_path

FILE_TYPE_COLORS: dict[str, str] = {
    "entry": "#f87171",
    "test": "#facc15",
    "api": "#4ade80",
    "component": "#60a5fa",
    "util": "#c084fc",
    "model": "#f472b6",
    "service": "#fb923c",
    "config": "#94a3b8",
    "docs": "#22d3ee",
    "source": "#e2e8f0",
}

_PURPOSE_LABELS: dict[str, str] = {
    "entry": "Entry point",
    "test": "Test suite",
    "api": "API route or handler",
    "component": "UI component",
    "util": "Shared utility",
    "model": "Data model or schema",
    "service": "Service or provider",
    "config": "Configuration",
    "docs": "Documentation",
    "source": "Source module",
}

# Ordered: the first matching rule wins.
_SEGMENT_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("api", ("/api/", "/routes/", "/controllers/", "/handlers/", "/endpoints/")),
    ("component", ("/components/", "/ui/", "/views/", "/widgets/", "/screens/")),
    ("util", ("/lib/", "/utils/", "/util/", "/helpers/", "/core/", "/common/", "/shared/")),
    ("model", ("/models/", "/entities/", "/schemas/", "/types/", "/domain/")),
    ("service", ("/services/", "/providers/", "/repositories/", "/clients/")),
)

_CONFIG_SUFFIXES = (
    ".json", ".gradle", ".xml", ".yaml", ".yml", ".toml", ".properties", ".ini", ".cfg",
)

HUB_THRESHOLD = 5


def classify_file(path: str) -> tuple[str, str]:
    """Return ``(file_type, color)`` for *path* (directories end with ``/``)."""
    file_type = _file_type(path)
    return file_type, FILE_TYPE_COLORS[file_type]


def _file_type(path: str) -> str:
    lower = "/" + path.lower()
    if is_test_path(path) or "/test/" in lower:
        return "test"
    if not path.endswith("/") and is_entrypoint(path):
        return "entry"
    for file_type, needles in _SEGMENT_RULES:
        if any(n in lower for n in needles):
            return file_type
    if lower.endswith(".md") or lower.endswith(".rst") or "/docs/" in lower:
        return "docs"
    name = posixpath.basename(lower)
    if ".config." in name or name.startswith(".env") or lower.endswith(_CONFIG_SUFFIXES):
        return "config"
    return "source"


def describe_purpose(file_type: str, in_degree: int, out_degree: int) -> str:
    """Short, deterministic description built from type and connectivity."""
    label = _PURPOSE_LABELS.get(file_type, _PURPOSE_LABELS["source"])
    if in_degree == 0 and out_degree == 0:
        return label
    if out_degree == 0:
        role = "leaf module"
    elif in_degree == 0:
        role = f"top-level importer of {out_degree} file{'s' if out_degree != 1 else ''}"
    elif in_degree >= HUB_THRESHOLD:
        role = f"hub imported by {in_degree} files"
    else:
        role = f"imports {out_degree}, imported by {in_degree}"
    return f"{label}, {role}"


def describe_folder(file_count: int) -> str:
    return f"Directory with {file_count} file{'s' if file_count != 1 else ''}"
