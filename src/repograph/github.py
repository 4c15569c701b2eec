"""GitHub client -- async wrapper around the REST tree and contents endpoints."""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field

from .models import EntryKind, FileEntry
from .paths import safe_path
from .providers import ContentFetchError, TreeFetchError

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


@dataclass
class GitHubClient:
    """Minimal async-friendly GitHub REST client using stdlib only.

    Implements both :class:`~repograph.providers.TreeProvider` and
    :class:`~repograph.providers.ContentProvider`.
    """

    token: str | None = None
    base_url: str = GITHUB_API_URL
    timeout: float = 20.0
    max_concurrency: int = 10
    _sem: asyncio.Semaphore | None = field(default=None, init=False, repr=False)
    _sem_loop: asyncio.AbstractEventLoop | None = field(default=None, init=False, repr=False)

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "repograph",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get_json_sync(self, url: str) -> object:
        """Blocking GET returning decoded JSON. Meant to be run via asyncio.to_thread."""
        req = urllib.request.Request(url, headers=self._headers(), method="GET")
        with urllib.request.urlopen(req, timeout=self.timeout) as resp:
            return json.loads(resp.read().decode("utf-8"))

    async def _get_json(self, url: str) -> object:
        # One semaphore per event loop; asyncio primitives cannot cross loops.
        loop = asyncio.get_running_loop()
        if self._sem is None or self._sem_loop is not loop:
            self._sem = asyncio.Semaphore(max(1, self.max_concurrency))
            self._sem_loop = loop
        async with self._sem:
            return await asyncio.to_thread(self._get_json_sync, url)

    def _repo_url(self, owner: str, repo: str) -> str:
        return (
            f"{self.base_url.rstrip('/')}/repos/"
            f"{urllib.parse.quote(owner, safe='')}/{urllib.parse.quote(repo, safe='')}"
        )

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    async def fetch_tree(self, owner: str, repo: str, branch: str) -> list[FileEntry]:
        url = f"{self._repo_url(owner, repo)}/git/trees/{urllib.parse.quote(branch, safe='')}?recursive=1"
        try:
            data = await self._get_json(url)
        except urllib.error.HTTPError as exc:
            raise TreeFetchError(
                f"Failed to fetch tree for {owner}/{repo}@{branch} ({exc.code})"
            ) from exc
        except (urllib.error.URLError, OSError, ValueError) as exc:
            raise TreeFetchError(f"Failed to fetch tree for {owner}/{repo}@{branch}: {exc}") from exc

        if not isinstance(data, dict) or not isinstance(data.get("tree"), list):
            raise TreeFetchError(f"Unexpected tree payload for {owner}/{repo}@{branch}")
        if data.get("truncated"):
            logger.warning("Tree listing for %s/%s@%s was truncated by GitHub.", owner, repo, branch)

        entries: list[FileEntry] = []
        for item in data["tree"]:
            if not isinstance(item, dict) or not item.get("path"):
                continue
            kind = item.get("type")
            if kind not in ("blob", "tree"):
                continue  # submodule commits
            size = item.get("size")
            entries.append(FileEntry(
                path=item["path"],
                kind=EntryKind(kind),
                size=size if isinstance(size, int) else None,
            ))
        return entries

    async def fetch_content(self, owner: str, repo: str, path: str, branch: str) -> str:
        clean = safe_path(path)
        url = (
            f"{self._repo_url(owner, repo)}/contents/{urllib.parse.quote(clean)}"
            f"?ref={urllib.parse.quote(branch, safe='')}"
        )
        try:
            data = await self._get_json(url)
        except urllib.error.HTTPError as exc:
            raise ContentFetchError(f"Failed to fetch {clean} ({exc.code})") from exc
        except (urllib.error.URLError, OSError, ValueError) as exc:
            raise ContentFetchError(f"Failed to fetch {clean}: {exc}") from exc

        if not isinstance(data, dict) or data.get("type") != "file":
            return ""
        if data.get("encoding") != "base64":
            return ""
        try:
            raw = base64.b64decode(data.get("content") or "")
        except ValueError as exc:
            raise ContentFetchError(f"Undecodable content for {clean}") from exc
        return raw.decode("utf-8", errors="replace")
