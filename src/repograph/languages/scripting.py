"""PHP and Ruby strategies."""

from __future__ import annotations

import re

from ..models import Language
from .base import FileIndex, RegexStrategy, join_relative, normalize

RELATIVE_MARKER = "relative:"

# -- PHP ---------------------------------------------------------------------

_PHP_USE = re.compile(r"^[ \t]*use[ \t]+(?:function[ \t]+|const[ \t]+)?\\?([\w\\]+)", re.MULTILINE)
_PHP_INCLUDE = re.compile(r"""\b(?:require|include)(?:_once)?\s*+\(?\s*+['"]([^'"\n]+)['"]""")
_PHP_EXTERNAL = re.compile(
    r"^(?:Illuminate|Symfony|Laravel|Psr|Doctrine|GuzzleHttp|Monolog|PHPUnit|"
    r"Carbon|Composer|Livewire|Inertia|League|Ramsey|Faker|Mockery|Twig|"
    r"Predis|Aws|Google|Stripe|Spatie)(?:\\|$)"
)


class PhpStrategy(RegexStrategy):
    language = Language.php
    patterns = (_PHP_USE, _PHP_INCLUDE)
    EXTERNAL = _PHP_EXTERNAL

    def clean(self, match: re.Match[str]) -> list[str]:
        value = match.group(1).strip().rstrip("\\")
        return [value] if value else []

    def resolve(self, specifier: str, importer_path: str, files: FileIndex) -> str | None:
        if "/" in specifier or specifier.endswith(".php"):
            hit = files.first([join_relative(importer_path, specifier) or "", normalize(specifier) or ""])
            if hit:
                return hit
            cleaned = normalize(specifier)
            return files.first_with_suffix(cleaned) if cleaned else None

        parts = [p for p in specifier.split("\\") if p]
        # PSR-4 roots map the vendor namespace onto a directory ("App\\" -> "app/").
        while len(parts) >= 2:
            hit = files.first_with_suffix("/".join(parts) + ".php")
            if hit:
                return hit
            parts = parts[1:]
        return None


# -- Ruby --------------------------------------------------------------------

_RB_REQUIRE = re.compile(r"""^[ \t]*require[ \t(]+['"]([^'"\n]+)['"]""", re.MULTILINE)
_RB_REQUIRE_RELATIVE = re.compile(r"""^[ \t]*require_relative[ \t(]+['"]([^'"\n]+)['"]""", re.MULTILINE)
_RB_EXTERNAL = re.compile(
    r"^(?:json|set|yaml|psych|csv|erb|uri|net/\w+|open-uri|openssl|digest|"
    r"securerandom|time|date|fileutils|pathname|tempfile|tmpdir|logger|optparse|"
    r"ostruct|singleton|forwardable|benchmark|socket|stringio|English|zlib|"
    r"base64|bigdecimal|pp|prettyprint|io/console|rbconfig|shellwords|open3|"
    r"timeout|monitor|thread|etc|webrick|rails|active_\w+|action_\w+|"
    r"sinatra|rack|rspec|minitest|bundler|rake|sidekiq|nokogiri|faraday|"
    r"httparty|devise|pg|mysql2|sqlite3|redis|dotenv)(?:/|$)"
)


class RubyStrategy(RegexStrategy):
    language = Language.ruby
    patterns = (_RB_REQUIRE, _RB_REQUIRE_RELATIVE)
    EXTERNAL = _RB_EXTERNAL

    def clean(self, match: re.Match[str]) -> list[str]:
        value = match.group(1).strip()
        if not value:
            return []
        if match.re is _RB_REQUIRE_RELATIVE:
            return [RELATIVE_MARKER + value]
        return [value]

    def is_external(self, specifier: str) -> bool:
        if specifier.startswith(RELATIVE_MARKER):
            return False
        return super().is_external(specifier)

    def resolve(self, specifier: str, importer_path: str, files: FileIndex) -> str | None:
        if specifier.startswith(RELATIVE_MARKER):
            base = join_relative(importer_path, specifier[len(RELATIVE_MARKER):])
            if not base:
                return None
            return files.first([base, base + ".rb"])

        base = normalize(specifier)
        if not base:
            return None
        name = base if base.endswith(".rb") else base + ".rb"
        return files.first([f"lib/{name}", name]) or files.first_with_suffix(name)
