"""Python strategy -- ``import a.b`` and ``from a.b import c``."""

from __future__ import annotations

import posixpath
import re

from ..models import Language
from .base import FileIndex, RegexStrategy, normalize

# Top-level statements only: both patterns are anchored at the start of a line.
_FROM_IMPORT = re.compile(
    r"^from[ \t]+(\.+[\w.]*|[\w.]+)[ \t]+import[ \t]+(\([^)]*\)|[^\n#;]*)",
    re.MULTILINE,
)
_IMPORT = re.compile(r"^import[ \t]+([^\n#;]+)", re.MULTILINE)

_STDLIB: frozenset[str] = frozenset({
    "__future__", "abc", "argparse", "array", "ast", "asyncio", "atexit", "base64",
    "binascii", "bisect", "builtins", "bz2", "calendar", "cmath", "codecs",
    "collections", "colorsys", "concurrent", "configparser", "contextlib",
    "contextvars", "copy", "copyreg", "cProfile", "csv", "ctypes", "curses",
    "dataclasses", "datetime", "dbm", "decimal", "difflib", "dis", "doctest",
    "email", "encodings", "enum", "errno", "faulthandler", "fcntl", "filecmp",
    "fileinput", "fnmatch", "fractions", "ftplib", "functools", "gc", "getopt",
    "getpass", "gettext", "glob", "graphlib", "grp", "gzip", "hashlib", "heapq",
    "hmac", "html", "http", "imaplib", "importlib", "inspect", "io", "ipaddress",
    "itertools", "json", "keyword", "linecache", "locale", "logging", "lzma",
    "mailbox", "marshal", "math", "mimetypes", "mmap", "multiprocessing",
    "netrc", "numbers", "operator", "optparse", "os", "pathlib", "pdb", "pickle",
    "pkgutil", "platform", "plistlib", "poplib", "posix", "posixpath", "pprint",
    "profile", "pstats", "pty", "pwd", "py_compile", "queue", "quopri", "random",
    "re", "readline", "reprlib", "resource", "rlcompleter", "runpy", "sched",
    "secrets", "select", "selectors", "shelve", "shlex", "shutil", "signal",
    "site", "smtplib", "socket", "socketserver", "sqlite3", "ssl", "stat",
    "statistics", "string", "stringprep", "struct", "subprocess", "symtable",
    "sys", "sysconfig", "syslog", "tabnanny", "tarfile", "tempfile", "termios",
    "textwrap", "threading", "time", "timeit", "tkinter", "token", "tokenize",
    "tomllib", "trace", "traceback", "tracemalloc", "tty", "turtle", "types",
    "typing", "unicodedata", "unittest", "urllib", "uuid", "venv", "warnings",
    "wave", "weakref", "webbrowser", "winreg", "wsgiref", "xml", "xmlrpc",
    "zipapp", "zipfile", "zipimport", "zlib", "zoneinfo",
})

# Widely used third-party distributions.
_ECOSYSTEM: frozenset[str] = frozenset({
    "aiohttp", "anthropic", "attr", "attrs", "boto3", "botocore", "celery",
    "click", "django", "fastapi", "flask", "google", "httpx", "jinja2", "jwt",
    "matplotlib", "numpy", "openai", "pandas", "PIL", "pydantic", "pytest",
    "redis", "requests", "rich", "scipy", "setuptools", "six", "sklearn",
    "sqlalchemy", "starlette", "tensorflow", "torch", "tqdm", "typer",
    "typing_extensions", "uvicorn", "yaml",
})


def _imported_names(raw: str) -> list[str]:
    names: list[str] = []
    for part in raw.strip().strip("()").replace("\\", " ").split(","):
        tokens = part.split()
        if tokens and tokens[0] != "*":
            names.append(tokens[0])
    return names


class PythonStrategy(RegexStrategy):
    language = Language.python
    patterns = (_FROM_IMPORT, _IMPORT)

    def clean(self, match: re.Match[str]) -> list[str]:
        if match.re is _IMPORT:
            # import a.b as c, d
            return [
                tokens[0]
                for tokens in (part.split() for part in match.group(1).split(","))
                if tokens
            ]
        module = match.group(1)
        if module.strip("."):
            return [module]
        # from . import sibling, other  ->  ".sibling", ".other"
        names = _imported_names(match.group(2))
        return [module + name for name in names] or [module]

    def is_external(self, specifier: str) -> bool:
        if specifier.startswith("."):
            return False
        top = specifier.split(".", 1)[0]
        return top in _STDLIB or top in _ECOSYSTEM

    def resolve(self, specifier: str, importer_path: str, files: FileIndex) -> str | None:
        if specifier.startswith("."):
            dots = len(specifier) - len(specifier.lstrip("."))
            base_dir = importer_path
            for _ in range(dots):
                if not base_dir:
                    return None
                base_dir = posixpath.dirname(base_dir)
            rest = specifier[dots:].replace(".", "/")
            candidate = normalize(posixpath.join(base_dir, rest) if rest else base_dir)
            if not candidate:
                return None
            return files.first([candidate + ".py", candidate + "/__init__.py"])

        as_path = specifier.replace(".", "/")
        hit = files.first([as_path + ".py", as_path + "/__init__.py"])
        if hit:
            return hit
        # src/ layouts and nested projects.
        return (
            files.first_with_suffix(as_path + ".py")
            or files.first_with_suffix(as_path + "/__init__.py")
        )
