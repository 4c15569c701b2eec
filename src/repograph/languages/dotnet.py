"""C# strategy -- ``using [static] A.B.C;`` directives."""

from __future__ import annotations

import re

from ..models import Language
from .base import FileIndex, RegexStrategy, dotted_allow_list, trailing_suffixes

# "using X = Y;" aliases are not matched: the name must be followed by ";".
_USING = re.compile(r"^[ \t]*(?:global[ \t]+)?using[ \t]+(?:static[ \t]+)?([\w.]+)[ \t]*;", re.MULTILINE)

_EXTERNAL = dotted_allow_list(
    "System", "Microsoft", "Newtonsoft", "NUnit", "Xunit", "Moq", "FluentAssertions",
    "AutoMapper", "MediatR", "Serilog", "Polly", "Dapper", "UnityEngine",
    "UnityEditor", "Unity", "TMPro", "Windows", "Android", "Java", "Foundation",
    "UIKit", "Xamarin", "Avalonia", "Grpc", "Google",
)


class CSharpStrategy(RegexStrategy):
    language = Language.csharp
    patterns = (_USING,)
    EXTERNAL = _EXTERNAL

    def resolve(self, specifier: str, importer_path: str, files: FileIndex) -> str | None:
        parts = [p for p in specifier.split(".") if p]
        if not parts:
            return None
        # using static A.B.Type;
        hit = files.first_with_suffix("/".join(parts) + ".cs")
        if hit:
            return hit
        # Namespace -> folder, matched on its trailing segments.
        for suffix in trailing_suffixes(parts):
            for directory in files.directories_with_suffix(suffix):
                sources = files.files_in(directory, (".cs",))
                if sources:
                    return sources[0]
        return None
