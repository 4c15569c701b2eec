"""Go strategy -- grouped and single ``import`` declarations."""

from __future__ import annotations

import posixpath
import re
from collections.abc import Mapping

from ..models import Language
from .base import FileIndex, RegexStrategy, normalize

_IMPORT_BLOCK = re.compile(r"\bimport\s*\(([^)]*)\)")
_QUOTED = re.compile(r'"([^"\n]+)"')
_SINGLE_IMPORT = re.compile(r'^[ \t]*import[ \t]+(?:[\w.]+[ \t]+)?"([^"\n]+)"', re.MULTILINE)
_MODULE_DIRECTIVE = re.compile(r"""^[ \t]*module[ \t]+["`]?([^\s"`]+)""", re.MULTILINE)

GO_MOD = "go.mod"


def parse_module_path(text: str) -> str | None:
    """Return the ``module`` path declared in go.mod *text*."""
    m = _MODULE_DIRECTIVE.search(text)
    return m.group(1).strip("/") if m else None


def module_roots(manifests: Mapping[str, str]) -> dict[str, str]:
    """``{go.mod path: text}`` -> ``{module path: module root directory}``."""
    roots: dict[str, str] = {}
    for path, text in manifests.items():
        if posixpath.basename(path) != GO_MOD:
            continue
        module = parse_module_path(text)
        if module:
            roots.setdefault(module, posixpath.dirname(path))
    return roots


class GoStrategy(RegexStrategy):
    language = Language.go

    def extract(self, text: str) -> list[str]:
        found: list[tuple[int, str]] = []
        for block in _IMPORT_BLOCK.finditer(text):
            offset = block.start(1)
            for m in _QUOTED.finditer(block.group(1)):
                found.append((offset + m.start(), m.group(1)))
        for m in _SINGLE_IMPORT.finditer(text):
            found.append((m.start(), m.group(1)))
        found.sort(key=lambda item: item[0])
        return [spec for _, spec in found]

    def is_external(self, specifier: str) -> bool:
        # "fmt", "os" ... the module-path check happens during resolution.
        return "/" not in specifier

    def resolve(self, specifier: str, importer_path: str, files: FileIndex) -> str | None:
        spec = specifier.strip("/")
        # Only paths under a module this repository declares are local;
        # longest module path first so nested modules win.
        for module in sorted(files.go_modules, key=len, reverse=True):
            if spec == module or spec.startswith(module + "/"):
                rest = spec[len(module):].strip("/")
                return _package_file(_join(files.go_modules[module], rest), files)
        return None


def _join(root: str, rest: str) -> str | None:
    return normalize(posixpath.join(root, rest) if root else rest)


def _package_file(directory: str | None, files: FileIndex) -> str | None:
    if directory is None:
        return None
    sources = [p for p in files.files_in(directory, (".go",)) if not p.endswith("_test.go")]
    if not sources:
        return None
    named = f"{directory}/{posixpath.basename(directory)}.go" if directory else ""
    return named if named in sources else sources[0]
