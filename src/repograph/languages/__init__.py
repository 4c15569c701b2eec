"""Language strategies -- routes extraction, classification and resolution by language."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models import Language
from .base import FileIndex, LanguageStrategy

logger = logging.getLogger(__name__)

__all__ = [
    "FileIndex",
    "LanguageStrategy",
    "extract_specifiers",
    "get_strategy",
    "is_external",
    "register",
    "resolve",
    "setup_strategies",
]

# Registry populated by setup_strategies() (lazily on first lookup).
_REGISTRY: dict[Language, LanguageStrategy] = {}


def register(strategy: LanguageStrategy) -> None:
    """Register *strategy* for its language, replacing any previous one."""
    _REGISTRY[strategy.language] = strategy


def setup_strategies() -> None:
    """Register all built-in strategies."""
    from .dart import DartStrategy
    from .dotnet import CSharpStrategy
    from .ecma import EcmaStrategy
    from .go import GoStrategy
    from .jvm import JavaStrategy, KotlinStrategy, ScalaStrategy
    from .native import CFamilyStrategy, SwiftStrategy
    from .python import PythonStrategy
    from .rust import RustStrategy
    from .scripting import PhpStrategy, RubyStrategy

    for strategy in (
        EcmaStrategy(),
        JavaStrategy(),
        KotlinStrategy(),
        ScalaStrategy(),
        PythonStrategy(),
        GoStrategy(),
        RustStrategy(),
        CFamilyStrategy(),
        SwiftStrategy(),
        PhpStrategy(),
        RubyStrategy(),
        DartStrategy(),
        CSharpStrategy(),
    ):
        register(strategy)


def get_strategy(language: Language) -> LanguageStrategy | None:
    """Return the strategy for *language*, or ``None`` if unsupported."""
    if not _REGISTRY:
        setup_strategies()
    return _REGISTRY.get(language)


def extract_specifiers(text: str, language: Language) -> list[str]:
    strategy = get_strategy(language)
    if strategy is None or not text:
        return []
    try:
        return strategy.extract(text)
    except Exception as exc:
        logger.debug("Specifier extraction failed for %s: %s", language.value, exc)
        return []


def is_external(specifier: str, language: Language) -> bool:
    """Pure predicate: does *specifier* name something outside the repository?

    Unsupported languages have nothing to resolve against, so everything
    they reference counts as external.
    """
    strategy = get_strategy(language)
    if strategy is None or not specifier:
        return True
    try:
        return strategy.is_external(specifier)
    except Exception as exc:
        logger.debug("External check failed for %r (%s): %s", specifier, language.value, exc)
        return True


def resolve(
    specifier: str,
    importer_path: str,
    language: Language,
    all_files: FileIndex | Sequence[str],
    all_files_set: frozenset[str] | set[str] | None = None,
) -> str | None:
    """Resolve a local *specifier* to a path in *all_files*, or ``None``.

    The result is always ``None`` or a member of *all_files*.
    """
    strategy = get_strategy(language)
    if strategy is None or not specifier:
        return None
    files = all_files if isinstance(all_files, FileIndex) else FileIndex(all_files, all_files_set)
    try:
        hit = strategy.resolve(specifier, importer_path, files)
    except Exception as exc:
        logger.debug("Resolution failed for %r from %s: %s", specifier, importer_path, exc)
        return None
    if hit is None or hit not in files:
        return None
    return hit
