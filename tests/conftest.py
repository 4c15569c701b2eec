"""Shared fakes for pipeline, web and CLI tests."""

from __future__ import annotations

import pytest

from repograph.cache import TTLCache
from repograph.models import EntryKind, FileEntry, RepographConfig
from repograph.pipeline import FlowchartPipeline
from repograph.providers import ContentFetchError, TreeFetchError


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRepo:
    """In-memory tree + content provider.

    ``branches`` maps branch name -> {path: text}. A text of ``None`` lists
    the file in the tree but makes its content fetch fail.
    """

    def __init__(self, branches: dict[str, dict[str, str | None]]) -> None:
        self.branches = branches
        self.tree_calls: list[str] = []
        self.content_calls: list[str] = []

    async def fetch_tree(self, owner: str, repo: str, branch: str) -> list[FileEntry]:
        self.tree_calls.append(branch)
        if branch not in self.branches:
            raise TreeFetchError(f"no branch {branch}")
        return [
            FileEntry(path=path, kind=EntryKind.blob, size=len(text or "x" * 90))
            for path, text in self.branches[branch].items()
        ]

    async def fetch_content(self, owner: str, repo: str, path: str, branch: str) -> str:
        self.content_calls.append(path)
        text = self.branches.get(branch, {}).get(path)
        if text is None:
            raise ContentFetchError(f"cannot fetch {path}")
        return text


def make_pipeline(
    branches: dict[str, dict[str, str | None]],
    clock: FakeClock | None = None,
    **config: object,
) -> tuple[FlowchartPipeline, FakeRepo, TTLCache]:
    repo = FakeRepo(branches)
    cache = TTLCache(clock=clock or FakeClock())
    pipeline = FlowchartPipeline(
        tree_provider=repo,
        content_provider=repo,
        cache=cache,
        config=RepographConfig(**config),
    )
    return pipeline, repo, cache


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
