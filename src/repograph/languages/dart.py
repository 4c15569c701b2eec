"""Dart strategy -- ``import``/``export``/``part`` URIs."""

from __future__ import annotations

import re

from ..models import Language
from .base import FileIndex, RegexStrategy, join_relative, normalize

_DIRECTIVE = re.compile(r"""^[ \t]*(?:import|export|part)[ \t]+['"]([^'"\n]+)['"]""", re.MULTILINE)


class DartStrategy(RegexStrategy):
    """Nothing is classified external up front.

    ``dart:`` URIs and ``package:`` URIs of other packages simply fail to
    resolve; ``package:`` URIs of this package map onto ``lib/``.
    """

    language = Language.dart
    patterns = (_DIRECTIVE,)

    def resolve(self, specifier: str, importer_path: str, files: FileIndex) -> str | None:
        if specifier.startswith("dart:"):
            return None
        if specifier.startswith("package:"):
            _, _, rest = specifier[len("package:"):].partition("/")
            rel = normalize(rest)
            if not rel:
                return None
            return files.first([f"lib/{rel}"]) or files.first_with_suffix(f"lib/{rel}")
        base = join_relative(importer_path, specifier)
        if not base:
            return None
        return files.first([base, base + ".dart"])
