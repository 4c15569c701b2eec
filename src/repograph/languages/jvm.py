"""JVM strategies: Java, Kotlin and Scala package-qualified imports."""

from __future__ import annotations

import re

from ..models import Language
from .base import FileIndex, RegexStrategy, dotted_allow_list

_JAVA_IMPORT = re.compile(r"^[ \t]*import[ \t]+(?:static[ \t]+)?([\w.]+(?:\.\*)?)[ \t]*;", re.MULTILINE)
_KOTLIN_IMPORT = re.compile(r"^[ \t]*import[ \t]+([\w.]+(?:\.\*)?)", re.MULTILINE)
_SCALA_IMPORT = re.compile(r"^[ \t]*import[ \t]+(\w+(?:\.\w+)*)(?:\.\{([^}\n]*)\})?", re.MULTILINE)

_JAVA_EXTERNAL = dotted_allow_list(
    "java", "javax", "jakarta", "android", "androidx", "dalvik", "sun", "com.sun",
    "kotlin", "kotlinx", "org.junit", "org.mockito", "org.springframework",
    "org.apache", "org.slf4j", "org.hibernate", "org.json", "org.w3c", "org.xml",
    "com.google", "com.fasterxml", "io.reactivex", "reactor", "okhttp3",
    "retrofit2", "lombok", "dagger",
)
_KOTLIN_EXTERNAL = dotted_allow_list(
    "kotlin", "kotlinx", "java", "javax", "android", "androidx", "com.google",
    "org.jetbrains", "org.junit", "io.ktor", "io.mockk", "okhttp3", "retrofit2",
    "dagger", "org.koin",
)
_SCALA_EXTERNAL = dotted_allow_list(
    "scala", "java", "javax", "akka", "cats", "zio", "play", "org.scalatest",
    "org.apache", "com.typesafe", "io.circe", "sbt",
)


def _strip_wildcard(value: str) -> str:
    for tail in (".*", "._"):
        if value.endswith(tail):
            return value[: -len(tail)]
    return value.rstrip(".")


class _JvmStrategy(RegexStrategy):
    """Dotted ``a.b.C`` -> ``a/b/C.<ext>`` by suffix scan over the listing."""

    source_extensions: tuple[str, ...] = (".java",)

    def clean(self, match: re.Match[str]) -> list[str]:
        value = _strip_wildcard(match.group(1))
        return [value] if value else []

    def resolve(self, specifier: str, importer_path: str, files: FileIndex) -> str | None:
        parts = [p for p in specifier.split(".") if p]
        # Full path first, then without the last segment (static / member imports).
        for size in (len(parts), len(parts) - 1):
            if size < 1:
                break
            as_path = "/".join(parts[:size])
            for ext in self.source_extensions:
                hit = files.first_with_suffix(as_path + ext)
                if hit:
                    return hit
        return None


class JavaStrategy(_JvmStrategy):
    language = Language.java
    patterns = (_JAVA_IMPORT,)
    EXTERNAL = _JAVA_EXTERNAL


class KotlinStrategy(_JvmStrategy):
    language = Language.kotlin
    patterns = (_KOTLIN_IMPORT,)
    EXTERNAL = _KOTLIN_EXTERNAL
    source_extensions = (".kt", ".kts", ".java")


class ScalaStrategy(_JvmStrategy):
    language = Language.scala
    patterns = (_SCALA_IMPORT,)
    EXTERNAL = _SCALA_EXTERNAL
    source_extensions = (".scala", ".java")

    def clean(self, match: re.Match[str]) -> list[str]:
        base = _strip_wildcard(match.group(1))
        if not base:
            return []
        selectors = match.group(2)
        if selectors is None:
            return [base]
        out: list[str] = []
        for selector in selectors.split(","):
            # "A => B" renames, "_" wildcards
            name = selector.split("=>")[0].strip()
            if name and name != "_":
                out.append(f"{base}.{name}")
        return out or [base]
