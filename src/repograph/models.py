"""Pydantic models for repograph's dependency-graph pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Repository snapshot
# ---------------------------------------------------------------------------

class EntryKind(str, Enum):
    blob = "blob"
    tree = "tree"


class FileEntry(BaseModel):
    """One entry of a repository tree listing."""

    path: str       # repo-relative path (forward slashes)
    kind: EntryKind = EntryKind.blob
    size: int | None = None


class RepoSnapshot(BaseModel):
    """The flat tree listing of one branch of a repository."""

    owner: str
    repo: str
    branch: str
    entries: list[FileEntry] = Field(default_factory=list)

    def file_paths(self) -> list[str]:
        """Return blob paths in listing order."""
        return [e.path for e in self.entries if e.kind is EntryKind.blob]

    def file_sizes(self) -> dict[str, int | None]:
        return {e.path: e.size for e in self.entries if e.kind is EntryKind.blob}


# ---------------------------------------------------------------------------
# Languages and references
# ---------------------------------------------------------------------------

class Language(str, Enum):
    ecma = "ecma"
    java = "java"
    kotlin = "kotlin"
    python = "python"
    go = "go"
    ruby = "ruby"
    rust = "rust"
    swift = "swift"
    c_family = "c_family"
    php = "php"
    dart = "dart"
    scala = "scala"
    csharp = "csharp"
    unknown = "unknown"


class Specifier(BaseModel):
    """A raw reference string pulled out of one file's text."""

    value: str
    source: str     # path of the file the specifier was found in
    language: Language


# ---------------------------------------------------------------------------
# Graph output
# ---------------------------------------------------------------------------

class GraphMode(str, Enum):
    imports = "imports"
    structure = "structure"
    empty = "empty"


class ResolvedEdge(BaseModel):
    """A directed ``source -> target`` dependency between two repo files."""

    id: str
    source: str
    target: str

    @classmethod
    def between(cls, source: str, target: str) -> ResolvedEdge:
        return cls(id=f"{source}->{target}", source=source, target=target)


class GraphNode(BaseModel):
    """A file (or, in structure mode, a directory) in the graph."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str
    full_path: str = Field(serialization_alias="fullPath")
    file_type: str = Field(serialization_alias="fileType")
    color: str
    lines: int = 0
    out_degree: int = Field(0, serialization_alias="imports")
    in_degree: int = Field(0, serialization_alias="importedBy")
    purpose: str = ""

    # Structure-mode only.
    is_folder: bool = Field(False, serialization_alias="isFolder")
    file_count: int | None = Field(None, serialization_alias="fileCount")

    def to_payload(self) -> dict[str, Any]:
        exclude = None if self.is_folder else {"is_folder", "file_count"}
        return self.model_dump(by_alias=True, exclude=exclude)


class FlowchartStats(BaseModel):
    """Counters describing how much of the repository was analysed."""

    total_files: int = Field(0, serialization_alias="totalFiles")
    analyzed_files: int = Field(0, serialization_alias="analyzedFiles")
    resolved_edges: int = Field(0, serialization_alias="resolvedEdges")


class FlowchartResult(BaseModel):
    """The complete, cacheable result of one graph computation."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[ResolvedEdge] = Field(default_factory=list)
    mode: GraphMode = GraphMode.empty
    stats: FlowchartStats = Field(default_factory=FlowchartStats)

    @classmethod
    def empty(cls, total_files: int = 0) -> FlowchartResult:
        return cls(mode=GraphMode.empty, stats=FlowchartStats(total_files=total_files))

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready dict exposed to HTTP and CLI callers."""
        return {
            "nodes": [n.to_payload() for n in self.nodes],
            "edges": [e.model_dump() for e in self.edges],
            "mode": self.mode.value,
            "stats": self.stats.model_dump(by_alias=True),
        }


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class RepographConfig(BaseModel):
    """User configuration stored in ``repograph.toml``.

    Precedence: CLI flag > environment > repograph.toml > default.
    """

    model_config = ConfigDict(extra="forbid")

    github_token: str | None = None
    """Token sent as ``Authorization: Bearer`` to the GitHub API."""

    api_base_url: str = "https://api.github.com"

    default_branch: str = "main"
    """Branch used when the caller does not name one."""

    fallback_branch: str = "master"
    """Branch tried once when the requested branch's tree cannot be fetched."""

    max_analyzed_files: int = 120
    """Number of top-ranked files whose content is fetched and parsed."""

    batch_size: int = 10
    """Concurrent content fetches per group."""

    node_cap: int = 150
    """Maximum nodes kept in an import-mode graph."""

    structure_node_cap: int = 60
    """Maximum nodes in a folder-structure graph."""

    cache_ttl: float = 3600.0
    """Seconds a computed graph is served from cache."""

    request_timeout: float = 20.0
    """Per-request timeout for GitHub API calls, in seconds."""
