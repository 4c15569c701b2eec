"""JavaScript / TypeScript (ECMAScript family) strategy."""

from __future__ import annotations

import re

from ..models import Language
from .base import FileIndex, RegexStrategy, index_files, join_relative, normalize, with_extensions

# Resolution order for extensionless specifiers.
SOURCE_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".mts", ".cts")

# Compiled-output extensions that TypeScript sources import by (ESM convention).
_TS_SIBLINGS: dict[str, tuple[str, ...]] = {
    ".js": (".ts", ".tsx"),
    ".jsx": (".tsx",),
    ".mjs": (".mts",),
    ".cjs": (".cts",),
}

# One import binding: a name, ``*``, a comma or a ``{...}`` list. Possessive
# quantifiers keep whitespace runs from being re-split between tokens.
_BINDING = r"""(?:(?!(?:from|import)\b)[\w$]++|\*|,|\{[^{}]*+\})"""

_STATIC_IMPORT = re.compile(
    r"""\bimport\b\s*+(?:""" + _BINDING + r"""(?:\s*+""" + _BINDING + r""")*+\s*+from\b\s*+)?"""
    r"""['"]([^'"\n]+)['"]"""
)
_REEXPORT = re.compile(
    r"""\bexport\b\s*+(?:type\b\s*+)?(?:\*(?:\s*+as\s++[\w$]++)?|\{[^{}]*+\})"""
    r"""\s*+from\b\s*+['"]([^'"\n]+)['"]"""
)
_DYNAMIC_IMPORT = re.compile(r"""\bimport\s*\(\s*['"]([^'"\n]+)['"]\s*\)""")
_REQUIRE = re.compile(r"""\brequire\s*\(\s*['"]([^'"\n]+)['"]\s*\)""")

_ALIASES = ("@/", "~/")


class EcmaStrategy(RegexStrategy):
    """Handles ``import``/``export from``/``import()``/``require()``."""

    language = Language.ecma
    patterns = (_STATIC_IMPORT, _REEXPORT, _DYNAMIC_IMPORT, _REQUIRE)

    def is_external(self, specifier: str) -> bool:
        # Bare package names ("react", "@scope/pkg", "node:fs") live outside the repo.
        return not (specifier.startswith(".") or specifier.startswith(_ALIASES))

    def resolve(self, specifier: str, importer_path: str, files: FileIndex) -> str | None:
        spec = re.split(r"[?#]", specifier, maxsplit=1)[0]
        bases: list[str | None]
        if spec.startswith(_ALIASES):
            rest = normalize(spec[2:])
            bases = [rest, normalize(f"src/{rest}") if rest is not None else None]
        elif spec.startswith("."):
            bases = [join_relative(importer_path, spec)]
        else:
            return None

        for base in bases:
            if base is None:
                continue
            hit = self._resolve_base(base, files)
            if hit:
                return hit
        return None

    @staticmethod
    def _resolve_base(base: str, files: FileIndex) -> str | None:
        candidates: list[str] = []
        if base:
            candidates.append(base)
            for ext, siblings in _TS_SIBLINGS.items():
                if base.endswith(ext):
                    stem = base[: -len(ext)]
                    candidates.extend(stem + s for s in siblings)
            candidates.extend(with_extensions(base, SOURCE_EXTENSIONS))
        candidates.extend(index_files(base, "index", SOURCE_EXTENSIONS))
        return files.first(candidates)
