"""Pipeline -- async coordination of one dependency-graph computation.

States::

    fetch-tree -> (fail -> alternate branch -> fail -> EMPTY)
      -> filter -> rank -> fetch-content -> extract/resolve -> assemble
      -> (no edges -> folder fallback) -> cache-store -> respond
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .assembler import assemble_graph
from .cache import ResultCache, cache_key
from .fetcher import fetch_contents
from .languages import FileIndex
from .languages.go import GO_MOD, module_roots
from .models import FileEntry, FlowchartResult, FlowchartStats, GraphMode, RepographConfig, RepoSnapshot
from .paths import safe_path
from .providers import ContentProvider, TreeFetchError, TreeProvider
from .ranker import rank_files
from .scanner import filter_paths, is_analyzable
from .structure import build_folder_graph

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "INTERNAL_SERVER_ERROR"

# go.mod files read per repository to learn Go module paths.
MAX_GO_MODULES = 8


@dataclass
class FlowchartPipeline:
    """Computes (and caches) the dependency graph of a repository.

    All collaborators are injected; construct one per process and share it
    across requests. Only the cache carries state between calls.
    """

    tree_provider: TreeProvider
    content_provider: ContentProvider
    cache: ResultCache | None = None
    config: RepographConfig = field(default_factory=RepographConfig)
    sanitize: Callable[[str], str] = safe_path

    # ------------------------------------------------------------------
    # Cache access (a failing cache never fails the request)
    # ------------------------------------------------------------------

    def _cache_get(self, key: str) -> FlowchartResult | None:
        if self.cache is None:
            return None
        try:
            return self.cache.get(key)
        except Exception as exc:
            logger.warning("Cache read failed for %s; computing uncached: %s", key, exc)
            return None

    def _cache_set(self, key: str, result: FlowchartResult) -> None:
        if self.cache is None:
            return
        try:
            self.cache.set(key, result, self.config.cache_ttl)
        except Exception as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _alternate_branch(self, branch: str) -> str:
        fallback = self.config.fallback_branch
        return fallback if branch != fallback else self.config.default_branch

    async def fetch_snapshot(self, owner: str, repo: str, branch: str) -> RepoSnapshot | None:
        """Fetch the tree, retrying once on an alternate branch. None if both fail."""
        entries: list[FileEntry]
        try:
            entries = await self.tree_provider.fetch_tree(owner, repo, branch)
        except TreeFetchError as exc:
            alternate = self._alternate_branch(branch)
            logger.warning("Tree fetch failed for %s/%s@%s (%s); trying %s.", owner, repo, branch, exc, alternate)
            branch = alternate
            try:
                entries = await self.tree_provider.fetch_tree(owner, repo, branch)
            except TreeFetchError as exc2:
                logger.warning("Tree fetch failed for %s/%s@%s (%s); returning empty graph.", owner, repo, branch, exc2)
                return None
        return RepoSnapshot(owner=owner, repo=repo, branch=branch, entries=entries)

    async def compute(self, owner: str, repo: str, branch: str | None = None) -> FlowchartResult:
        key = cache_key(owner, repo)
        cached = self._cache_get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        snapshot = await self.fetch_snapshot(owner, repo, branch or self.config.default_branch)
        if snapshot is None:
            return FlowchartResult.empty()

        all_files = filter_paths(snapshot.file_paths())
        if not all_files:
            return FlowchartResult.empty()

        result = await self._build(snapshot, all_files)
        self._cache_set(key, result)
        return result

    async def _build(self, snapshot: RepoSnapshot, all_files: list[str]) -> FlowchartResult:
        cfg = self.config
        total = len(all_files)

        if not any(is_analyzable(p) for p in all_files):
            logger.info("%s/%s has no analyzable source files; using folder structure.", snapshot.owner, snapshot.repo)
            return self._structure_result(all_files, analyzed=0)

        ranked = rank_files(all_files, cfg.max_analyzed_files)
        contents = await fetch_contents(
            self.content_provider,
            snapshot.owner,
            snapshot.repo,
            snapshot.branch,
            ranked,
            batch_size=cfg.batch_size,
        )
        go_modules = await self._go_modules(snapshot, all_files, ranked)
        index = FileIndex(all_files, go_modules=go_modules)
        nodes, edges = assemble_graph(
            ranked,
            contents,
            index,
            snapshot.file_sizes(),
            node_cap=cfg.node_cap,
            sanitize=self.sanitize,
        )

        if not edges:
            logger.info("No import edges resolved for %s/%s; using folder structure.", snapshot.owner, snapshot.repo)
            return self._structure_result(all_files, analyzed=len(contents))

        logger.info(
            "Built import graph for %s/%s: %d nodes, %d edges (%d/%d files analysed).",
            snapshot.owner, snapshot.repo, len(nodes), len(edges), len(contents), total,
        )
        return FlowchartResult(
            nodes=nodes,
            edges=edges,
            mode=GraphMode.imports,
            stats=FlowchartStats(total_files=total, analyzed_files=len(contents), resolved_edges=len(edges)),
        )

    async def _go_modules(self, snapshot: RepoSnapshot, all_files: list[str], ranked: list[str]) -> dict[str, str]:
        """Map Go module paths to their roots when any Go source was selected.

        Modules come from the repository's go.mod files. Without a readable
        one, the repository's own GitHub import path names the root module.
        """
        if not any(p.endswith(".go") for p in ranked):
            return {}
        manifests = [p for p in all_files if posixpath.basename(p) == GO_MOD][:MAX_GO_MODULES]
        roots: dict[str, str] = {}
        if manifests:
            texts = await fetch_contents(
                self.content_provider,
                snapshot.owner,
                snapshot.repo,
                snapshot.branch,
                manifests,
                batch_size=self.config.batch_size,
            )
            roots = module_roots(texts)
        return roots or {f"github.com/{snapshot.owner}/{snapshot.repo}": ""}

    def _structure_result(self, all_files: list[str], analyzed: int) -> FlowchartResult:
        nodes, edges = build_folder_graph(all_files, self.config.structure_node_cap, self.sanitize)
        return FlowchartResult(
            nodes=nodes,
            edges=edges,
            mode=GraphMode.structure,
            stats=FlowchartStats(total_files=len(all_files), analyzed_files=analyzed, resolved_edges=0),
        )

    # ------------------------------------------------------------------
    # Request boundary
    # ------------------------------------------------------------------

    async def handle(self, owner: str, repo: str, branch: str | None = None) -> dict[str, Any]:
        """Compute and wrap the result as ``{success, ...}``; never raises."""
        try:
            result = await self.compute(owner, repo, branch)
        except Exception as exc:
            logger.exception("Flowchart computation failed for %s/%s", owner, repo)
            return {"success": False, "error": INTERNAL_ERROR, "message": str(exc)}
        return {"success": True, **result.to_payload()}


def build_pipeline(config: RepographConfig | None = None) -> FlowchartPipeline:
    """Wire the GitHub client and an in-memory cache into a pipeline."""
    from .cache import TTLCache
    from .github import GitHubClient

    cfg = config or RepographConfig()
    client = GitHubClient(
        token=cfg.github_token,
        base_url=cfg.api_base_url,
        timeout=cfg.request_timeout,
        max_concurrency=cfg.batch_size,
    )
    return FlowchartPipeline(
        tree_provider=client,
        content_provider=client,
        cache=TTLCache(ttl=cfg.cache_ttl),
        config=cfg,
    )
