"""End-to-end tests for the flowchart pipeline with in-memory providers."""

from __future__ import annotations

import asyncio

from conftest import FakeClock, FakeRepo, make_pipeline

from repograph.cache import TTLCache
from repograph.github import GitHubClient
from repograph.models import FileEntry, GraphMode, RepographConfig
from repograph.pipeline import INTERNAL_ERROR, FlowchartPipeline, build_pipeline


SCENARIO_A = {
    "src/a.ts": "import { x } from './b';\n",
    "src/b.ts": "export const x = 1;\n",
}


class TestScenarios:
    def test_typescript_import_edge(self):
        pipeline, _, _ = make_pipeline({"main": SCENARIO_A})
        payload = asyncio.run(pipeline.handle("octo", "repo"))
        assert payload["success"] is True
        assert payload["mode"] == "imports"
        assert [(e["source"], e["target"]) for e in payload["edges"]] == [("src/a.ts", "src/b.ts")]
        assert payload["stats"] == {"totalFiles": 2, "analyzedFiles": 2, "resolvedEdges": 1}
        assert [n["id"] for n in payload["nodes"]] == ["src/a.ts", "src/b.ts"]

    def test_readme_only_repo_uses_structure(self):
        pipeline, repo, _ = make_pipeline({"main": {"README.md": "# hello\n"}})
        result = asyncio.run(pipeline.compute("octo", "docs"))
        assert result.mode is GraphMode.structure
        assert result.edges == []
        assert [n.id for n in result.nodes] == ["README.md"]
        assert result.stats.analyzed_files == 0
        assert repo.content_calls == []

    def test_missing_repository_is_empty_success(self):
        pipeline, repo, cache = make_pipeline({})
        payload = asyncio.run(pipeline.handle("octo", "ghost"))
        assert payload["success"] is True
        assert payload["nodes"] == []
        assert payload["edges"] == []
        assert payload["mode"] == "empty"
        assert repo.tree_calls == ["main", "master"]
        assert len(cache) == 0

    def test_python_sibling_import(self):
        files = {"pkg/mod_a.py": "from . import mod_b\n", "pkg/mod_b.py": "VALUE = 1\n"}
        pipeline, _, _ = make_pipeline({"main": files})
        result = asyncio.run(pipeline.compute("octo", "py"))
        assert result.mode is GraphMode.imports
        assert [(e.source, e.target) for e in result.edges] == [("pkg/mod_a.py", "pkg/mod_b.py")]


GO_MAIN = """\
package main

import (
\t"example.com/acme/svc/internal/store"
\t"github.com/pkg/errors"
)
"""


class TestGoModules:
    def test_module_path_comes_from_go_mod(self):
        files = {
            "go.mod": "module example.com/acme/svc\n\ngo 1.22\n",
            "cmd/app/main.go": GO_MAIN,
            "internal/store/store.go": "package store\n",
            "internal/errors/errors.go": "package errors\n",
        }
        pipeline, repo, _ = make_pipeline({"main": files})
        result = asyncio.run(pipeline.compute("octo", "svc"))
        assert result.mode is GraphMode.imports
        assert [(e.source, e.target) for e in result.edges] == [("cmd/app/main.go", "internal/store/store.go")]
        assert "go.mod" in repo.content_calls
        assert result.stats.analyzed_files == 3
        assert result.stats.total_files == 4

    def test_repository_import_path_without_go_mod(self):
        files = {
            "main.go": 'package main\n\nimport "github.com/octo/tool/pkg/util"\n',
            "pkg/util/util.go": "package util\n",
        }
        pipeline, repo, _ = make_pipeline({"main": files})
        result = asyncio.run(pipeline.compute("octo", "tool"))
        assert [(e.source, e.target) for e in result.edges] == [("main.go", "pkg/util/util.go")]
        assert sorted(repo.content_calls) == ["main.go", "pkg/util/util.go"]

    def test_unreadable_go_mod_falls_back_to_repository_path(self):
        files = {
            "go.mod": None,
            "main.go": 'package main\n\nimport "github.com/octo/tool/pkg/util"\n',
            "pkg/util/util.go": "package util\n",
        }
        pipeline, _, _ = make_pipeline({"main": files})
        result = asyncio.run(pipeline.compute("octo", "tool"))
        assert [(e.source, e.target) for e in result.edges] == [("main.go", "pkg/util/util.go")]

    def test_non_go_repositories_skip_go_mod(self):
        files = dict(SCENARIO_A, **{"tools/go.mod": "module example.com/tools\n"})
        pipeline, repo, _ = make_pipeline({"main": files})
        asyncio.run(pipeline.compute("octo", "web"))
        assert "tools/go.mod" not in repo.content_calls


class TestBranchFallback:
    def test_falls_back_to_master(self):
        pipeline, repo, _ = make_pipeline({"master": SCENARIO_A})
        result = asyncio.run(pipeline.compute("octo", "old"))
        assert result.mode is GraphMode.imports
        assert repo.tree_calls == ["main", "master"]

    def test_requested_master_falls_back_to_main(self):
        pipeline, repo, _ = make_pipeline({"main": SCENARIO_A})
        result = asyncio.run(pipeline.compute("octo", "repo", "master"))
        assert result.mode is GraphMode.imports
        assert repo.tree_calls == ["master", "main"]

    def test_explicit_branch(self):
        pipeline, repo, _ = make_pipeline({"dev": SCENARIO_A})
        result = asyncio.run(pipeline.compute("octo", "repo", "dev"))
        assert result.mode is GraphMode.imports
        assert repo.tree_calls == ["dev"]

    def test_configured_branches(self):
        pipeline, repo, _ = make_pipeline({"trunk": SCENARIO_A}, default_branch="develop", fallback_branch="trunk")
        result = asyncio.run(pipeline.compute("octo", "repo"))
        assert result.mode is GraphMode.imports
        assert repo.tree_calls == ["develop", "trunk"]


class TestDegradation:
    def test_empty_tree(self):
        pipeline, _, cache = make_pipeline({"main": {}})
        result = asyncio.run(pipeline.compute("octo", "blank"))
        assert result.mode is GraphMode.empty
        assert len(cache) == 0

    def test_only_excluded_files(self):
        pipeline, _, _ = make_pipeline({"main": {"node_modules/left-pad/index.js": "module.exports = 1;\n"}})
        result = asyncio.run(pipeline.compute("octo", "vendored"))
        assert result.mode is GraphMode.empty

    def test_no_resolved_edges_falls_back_to_structure(self):
        files = {"src/a.py": "import os\n", "src/b.py": "import json\n"}
        pipeline, _, cache = make_pipeline({"main": files})
        result = asyncio.run(pipeline.compute("octo", "flat"))
        assert result.mode is GraphMode.structure
        assert result.stats.analyzed_files == 2
        assert result.stats.resolved_edges == 0
        assert [n.id for n in result.nodes] == ["src", "src/a.py", "src/b.py"]
        assert len(cache) == 1

    def test_failed_content_fetch_skips_file(self):
        files = {
            "src/a.ts": "import './b';\n",
            "src/b.ts": "export {};\n",
            "src/c.ts": None,
        }
        pipeline, repo, _ = make_pipeline({"main": files})
        result = asyncio.run(pipeline.compute("octo", "flaky"))
        assert result.mode is GraphMode.imports
        assert result.stats.analyzed_files == 2
        assert result.stats.total_files == 3
        assert "src/c.ts" in repo.content_calls

    def test_unfetched_target_line_estimate(self):
        files = {"src/index.ts": "import './b';\n", "src/b.ts": "export const b = 1;\n" * 30}
        pipeline, repo, _ = make_pipeline({"main": files}, max_analyzed_files=1)
        result = asyncio.run(pipeline.compute("octo", "big"))
        assert repo.content_calls == ["src/index.ts"]
        assert result.stats.analyzed_files == 1
        b = next(n for n in result.nodes if n.id == "src/b.ts")
        assert b.lines == 20  # 600 bytes / 30

    def test_unhandled_fault_becomes_error_payload(self):
        class Exploding(FakeRepo):
            async def fetch_tree(self, owner, repo, branch):
                raise RuntimeError("disk on fire")

        provider = Exploding({})
        pipeline = FlowchartPipeline(tree_provider=provider, content_provider=provider)
        payload = asyncio.run(pipeline.handle("octo", "repo"))
        assert payload == {"success": False, "error": INTERNAL_ERROR, "message": "disk on fire"}


class TestCaching:
    def test_second_call_is_a_cache_hit(self, clock: FakeClock):
        pipeline, repo, _ = make_pipeline({"main": SCENARIO_A}, clock=clock)
        first = asyncio.run(pipeline.compute("octo", "repo"))
        second = asyncio.run(pipeline.compute("octo", "repo"))
        assert second is first
        assert repo.tree_calls == ["main"]

    def test_recompute_after_expiry_is_equivalent(self, clock: FakeClock):
        pipeline, repo, _ = make_pipeline({"main": SCENARIO_A}, clock=clock)
        first = asyncio.run(pipeline.compute("octo", "repo"))
        clock.advance(3600)
        again = asyncio.run(pipeline.compute("octo", "repo"))
        assert again is not first
        assert again == first
        assert repo.tree_calls == ["main", "main"]

    def test_cache_key_ignores_branch(self, clock: FakeClock):
        pipeline, repo, _ = make_pipeline({"main": SCENARIO_A, "dev": {"x.py": ""}}, clock=clock)
        first = asyncio.run(pipeline.compute("octo", "repo", "main"))
        other = asyncio.run(pipeline.compute("octo", "repo", "dev"))
        assert other is first

    def test_faulty_cache_does_not_fail_request(self):
        class BrokenCache:
            def get(self, key):
                raise ConnectionError("cache down")

            def set(self, key, value, ttl=None):
                raise ConnectionError("cache down")

        repo = FakeRepo({"main": SCENARIO_A})
        pipeline = FlowchartPipeline(tree_provider=repo, content_provider=repo, cache=BrokenCache())
        payload = asyncio.run(pipeline.handle("octo", "repo"))
        assert payload["success"] is True
        assert payload["mode"] == "imports"

    def test_no_cache(self):
        repo = FakeRepo({"main": SCENARIO_A})
        pipeline = FlowchartPipeline(tree_provider=repo, content_provider=repo)
        asyncio.run(pipeline.compute("octo", "repo"))
        asyncio.run(pipeline.compute("octo", "repo"))
        assert repo.tree_calls == ["main", "main"]


class TestBuildPipeline:
    def test_wires_client_and_cache_from_config(self):
        cfg = RepographConfig(github_token="t0k", api_base_url="https://ghe.example/api/v3", cache_ttl=10)
        pipeline = build_pipeline(cfg)
        assert isinstance(pipeline.tree_provider, GitHubClient)
        assert pipeline.tree_provider is pipeline.content_provider
        assert pipeline.tree_provider.token == "t0k"
        assert pipeline.tree_provider.base_url == "https://ghe.example/api/v3"
        assert isinstance(pipeline.cache, TTLCache)
        assert pipeline.config is cfg

    def test_snapshot_records_resolved_branch(self):
        repo = FakeRepo({"master": {"a.py": "x = 1\n"}})
        pipeline = FlowchartPipeline(tree_provider=repo, content_provider=repo)
        snapshot = asyncio.run(pipeline.fetch_snapshot("octo", "repo", "main"))
        assert snapshot is not None
        assert snapshot.branch == "master"
        assert snapshot.entries == [FileEntry(path="a.py", size=6)]
