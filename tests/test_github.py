"""Tests for the GitHub REST client (HTTP layer stubbed out)."""

from __future__ import annotations

import asyncio
import base64
import urllib.error

import pytest

from repograph.github import GitHubClient
from repograph.models import EntryKind, FileEntry
from repograph.providers import (
    ContentFetchError,
    ContentProvider,
    ProviderError,
    TreeFetchError,
    TreeProvider,
)


def _stub(client: GitHubClient, monkeypatch, response) -> list[str]:
    urls: list[str] = []

    def fake_get(url: str):
        urls.append(url)
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(client, "_get_json_sync", fake_get)
    return urls


def _http_error(code: int) -> urllib.error.HTTPError:
    return urllib.error.HTTPError("https://api.github.com/x", code, "error", {}, None)


class TestClientBasics:
    def test_implements_both_providers(self):
        client = GitHubClient()
        assert isinstance(client, TreeProvider)
        assert isinstance(client, ContentProvider)

    def test_error_hierarchy(self):
        assert issubclass(TreeFetchError, ProviderError)
        assert issubclass(ContentFetchError, ProviderError)

    def test_headers(self):
        assert "Authorization" not in GitHubClient()._headers()
        headers = GitHubClient(token="abc")._headers()
        assert headers["Authorization"] == "Bearer abc"
        assert headers["Accept"] == "application/vnd.github+json"


class TestFetchTree:
    def test_parses_entries(self, monkeypatch):
        client = GitHubClient(base_url="https://ghe.example/api/v3/")
        urls = _stub(client, monkeypatch, {
            "tree": [
                {"path": "src", "type": "tree"},
                {"path": "src/a.ts", "type": "blob", "size": 120},
                {"path": "vendor/lib", "type": "commit"},
                {"path": "", "type": "blob"},
            ],
            "truncated": False,
        })
        entries = asyncio.run(client.fetch_tree("octo", "cat", "main"))
        assert entries == [
            FileEntry(path="src", kind=EntryKind.tree),
            FileEntry(path="src/a.ts", kind=EntryKind.blob, size=120),
        ]
        assert urls == ["https://ghe.example/api/v3/repos/octo/cat/git/trees/main?recursive=1"]

    def test_branch_is_quoted(self, monkeypatch):
        client = GitHubClient()
        urls = _stub(client, monkeypatch, {"tree": []})
        asyncio.run(client.fetch_tree("octo", "cat", "feature/x"))
        assert urls[0].endswith("/git/trees/feature%2Fx?recursive=1")

    def test_http_error_is_tree_fetch_error(self, monkeypatch):
        client = GitHubClient()
        _stub(client, monkeypatch, _http_error(404))
        with pytest.raises(TreeFetchError, match="404"):
            asyncio.run(client.fetch_tree("octo", "cat", "main"))

    def test_network_error_is_tree_fetch_error(self, monkeypatch):
        client = GitHubClient()
        _stub(client, monkeypatch, urllib.error.URLError("unreachable"))
        with pytest.raises(TreeFetchError):
            asyncio.run(client.fetch_tree("octo", "cat", "main"))

    def test_unexpected_payload(self, monkeypatch):
        client = GitHubClient()
        _stub(client, monkeypatch, {"message": "Not Found"})
        with pytest.raises(TreeFetchError):
            asyncio.run(client.fetch_tree("octo", "cat", "main"))


class TestFetchContent:
    def test_decodes_base64(self, monkeypatch):
        client = GitHubClient()
        encoded = base64.b64encode(b"import os\nprint(os.name)\n").decode("ascii")
        wrapped = encoded[:10] + "\n" + encoded[10:]
        urls = _stub(client, monkeypatch, {"type": "file", "encoding": "base64", "content": wrapped})
        text = asyncio.run(client.fetch_content("octo", "cat", "src/my file.py", "dev"))
        assert text == "import os\nprint(os.name)\n"
        assert urls == ["https://api.github.com/repos/octo/cat/contents/src/my%20file.py?ref=dev"]

    def test_path_is_sanitized(self, monkeypatch):
        client = GitHubClient()
        urls = _stub(client, monkeypatch, {"type": "file", "encoding": "base64", "content": ""})
        asyncio.run(client.fetch_content("octo", "cat", "./src//a/../b.py", "main"))
        assert "/contents/src/b.py?" in urls[0]

    def test_directory_payload_is_empty(self, monkeypatch):
        client = GitHubClient()
        _stub(client, monkeypatch, [{"type": "file", "path": "src/a.py"}])
        assert asyncio.run(client.fetch_content("octo", "cat", "src", "main")) == ""

    def test_http_error_is_content_fetch_error(self, monkeypatch):
        client = GitHubClient()
        _stub(client, monkeypatch, _http_error(403))
        with pytest.raises(ContentFetchError, match="403"):
            asyncio.run(client.fetch_content("octo", "cat", "a.py", "main"))

    def test_semaphore_survives_separate_event_loops(self, monkeypatch):
        client = GitHubClient(max_concurrency=2)
        _stub(client, monkeypatch, {"tree": []})
        asyncio.run(client.fetch_tree("octo", "cat", "main"))
        asyncio.run(client.fetch_tree("octo", "cat", "main"))
