"""Collaborator contracts consumed by the pipeline.

Implementations:
  - GitHubClient        (REST API, see ``github.py``)
  - in-memory fakes     (tests)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import FileEntry


class ProviderError(RuntimeError):
    """Base class for failures reported by a tree or content provider."""


class TreeFetchError(ProviderError):
    """The tree listing for a branch could not be fetched."""


class ContentFetchError(ProviderError):
    """The text of a single file could not be fetched."""


@runtime_checkable
class TreeProvider(Protocol):
    async def fetch_tree(self, owner: str, repo: str, branch: str) -> list[FileEntry]:
        """Return the flat recursive listing of *branch*.

        Raises :class:`TreeFetchError` when the branch (or repository) cannot
        be listed, so the caller can try an alternate branch.
        """
        ...


@runtime_checkable
class ContentProvider(Protocol):
    async def fetch_content(self, owner: str, repo: str, path: str, branch: str) -> str:
        """Return the decoded text of *path*; raise :class:`ContentFetchError` on failure."""
        ...
