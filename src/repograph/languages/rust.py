"""Rust strategy -- ``use crate::``/``super::``/``self::`` paths and ``mod name;``."""

from __future__ import annotations

import posixpath
import re

from ..models import Language
from .base import FileIndex, RegexStrategy

MOD_MARKER = "mod:"

_VIS = r"(?:pub(?:\([^)\n]*\))?[ \t]+)?"
_USE = re.compile(
    rf"^[ \t]*{_VIS}use[ \t]+((?:crate|super|self)(?:::(?:super|\w+))*)",
    re.MULTILINE,
)
_MOD = re.compile(rf"^[ \t]*{_VIS}mod[ \t]+(\w+)[ \t]*;", re.MULTILINE)

_ROOT_FILES = ("lib.rs", "main.rs", "mod.rs")


def _module_dir(importer_path: str) -> str:
    """Directory holding the children of the module defined by *importer_path*.

    ``src/lib.rs`` / ``src/net/mod.rs`` own their directory; a non-root file
    ``src/net.rs`` owns ``src/net/``.
    """
    directory = posixpath.dirname(importer_path)
    name = posixpath.basename(importer_path)
    if name in _ROOT_FILES:
        return directory
    stem = posixpath.splitext(name)[0]
    return f"{directory}/{stem}" if directory else stem


def _module_file(module_dir: str, files: FileIndex) -> str | None:
    """The file defining the module whose children live in *module_dir*."""
    candidates = [f"{module_dir}/mod.rs", f"{module_dir}.rs"] if module_dir else []
    prefix = f"{module_dir}/" if module_dir else ""
    candidates += [f"{prefix}lib.rs", f"{prefix}main.rs"]
    return files.first(candidates)


def _crate_root(importer_path: str, files: FileIndex) -> str:
    directory = posixpath.dirname(importer_path)
    while True:
        prefix = f"{directory}/" if directory else ""
        if f"{prefix}lib.rs" in files or f"{prefix}main.rs" in files:
            return directory
        if not directory:
            break
        directory = posixpath.dirname(directory)
    return "src" if any(p.startswith("src/") for p in files.paths) else ""


class RustStrategy(RegexStrategy):
    language = Language.rust
    patterns = (_USE, _MOD)

    def clean(self, match: re.Match[str]) -> list[str]:
        if match.re is _MOD:
            return [MOD_MARKER + match.group(1)]
        return [match.group(1)]

    def resolve(self, specifier: str, importer_path: str, files: FileIndex) -> str | None:
        if specifier.startswith(MOD_MARKER):
            return self._resolve_mod(specifier[len(MOD_MARKER):], importer_path, files)

        segments = specifier.split("::")
        head = segments[0]
        if head == "crate":
            base = _crate_root(importer_path, files)
            rest = segments[1:]
        elif head in ("self", "super"):
            base = _module_dir(importer_path)
            rest = segments
            while rest and rest[0] in ("self", "super"):
                if rest[0] == "super":
                    if not base:
                        return None
                    base = posixpath.dirname(base)
                rest = rest[1:]
        else:
            return None
        return self._resolve_path(base, rest, files)

    @staticmethod
    def _resolve_mod(name: str, importer_path: str, files: FileIndex) -> str | None:
        module_dir = _module_dir(importer_path)
        prefix = f"{module_dir}/" if module_dir else ""
        hit = files.first([f"{prefix}{name}.rs", f"{prefix}{name}/mod.rs"])
        if hit:
            return hit
        # Pre-2018 layout: siblings of the declaring file.
        sibling_dir = posixpath.dirname(importer_path)
        sibling = f"{sibling_dir}/" if sibling_dir else ""
        return files.first([f"{sibling}{name}.rs", f"{sibling}{name}/mod.rs"])

    @staticmethod
    def _resolve_path(base: str, rest: list[str], files: FileIndex) -> str | None:
        # Longest module prefix that exists; trailing segments are items.
        for size in range(len(rest), 0, -1):
            rel = "/".join(rest[:size])
            path = f"{base}/{rel}" if base else rel
            hit = files.first([path + ".rs", path + "/mod.rs"])
            if hit:
                return hit
        return _module_file(base, files)
