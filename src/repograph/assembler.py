"""Graph assembler -- turns fetched file contents into a bounded import graph."""

from __future__ import annotations

import logging
import posixpath
from collections import Counter
from collections.abc import Callable, Mapping

from .languages import FileIndex, extract_specifiers, is_external, resolve
from .models import GraphNode, ResolvedEdge, Specifier
from .presentation import classify_file, describe_purpose
from .scanner import detect_language

logger = logging.getLogger(__name__)

NODE_CAP = 150
BYTES_PER_LINE = 30


def file_specifiers(path: str, text: str) -> list[Specifier]:
    """Tag every raw specifier found in *text* with its file and language."""
    language = detect_language(path)
    return [
        Specifier(value=value, source=path, language=language)
        for value in extract_specifiers(text, language)
    ]


def collect_edges(
    ranked: list[str],
    contents: Mapping[str, str],
    index: FileIndex,
) -> tuple[list[ResolvedEdge], list[str]]:
    """Extract, classify and resolve every fetched file's specifiers.

    Returns ``(edges, connected)``: deduplicated edges in discovery order and
    the connected files in the order they first joined an edge.
    """
    edges: list[ResolvedEdge] = []
    seen: set[tuple[str, str]] = set()
    connected: dict[str, None] = {}

    for source in ranked:
        text = contents.get(source)
        if not text:
            continue
        for spec in file_specifiers(source, text):
            if is_external(spec.value, spec.language):
                continue
            target = resolve(spec.value, source, spec.language, index)
            if target is None or target == source:
                continue
            pair = (source, target)
            if pair in seen:
                continue
            seen.add(pair)
            edges.append(ResolvedEdge.between(source, target))
            connected.setdefault(source, None)
            connected.setdefault(target, None)

    return edges, list(connected)


def truncate_by_degree(
    edges: list[ResolvedEdge],
    connected: list[str],
    node_cap: int = NODE_CAP,
) -> tuple[list[str], list[ResolvedEdge]]:
    """Keep the *node_cap* best-connected files and the edges among them."""
    if len(connected) <= node_cap:
        return connected, edges

    degree: Counter[str] = Counter()
    for e in edges:
        degree[e.source] += 1
        degree[e.target] += 1
    # Stable sort: ties keep first-connection order.
    keep = sorted(connected, key=lambda p: degree[p], reverse=True)[:node_cap]
    kept = set(keep)
    retained = [p for p in connected if p in kept]
    kept_edges = [e for e in edges if e.source in kept and e.target in kept]
    logger.info(
        "Truncated graph from %d to %d nodes (%d -> %d edges).",
        len(connected), len(retained), len(edges), len(kept_edges),
    )
    return retained, kept_edges


def estimate_lines(path: str, contents: Mapping[str, str], sizes: Mapping[str, int | None]) -> int:
    text = contents.get(path)
    if text:
        return len(text.splitlines()) or 1
    size = sizes.get(path) or 0
    return max(1, round(size / BYTES_PER_LINE))


def build_nodes(
    retained: list[str],
    edges: list[ResolvedEdge],
    contents: Mapping[str, str],
    sizes: Mapping[str, int | None],
    sanitize: Callable[[str], str],
) -> list[GraphNode]:
    """Attach presentation metadata to the final node set."""
    in_degree: Counter[str] = Counter(e.target for e in edges)
    out_degree: Counter[str] = Counter(e.source for e in edges)

    nodes: list[GraphNode] = []
    for path in retained:
        file_type, color = classify_file(path)
        nodes.append(GraphNode(
            id=path,
            label=posixpath.basename(path),
            full_path=sanitize(path),
            file_type=file_type,
            color=color,
            lines=estimate_lines(path, contents, sizes),
            in_degree=in_degree[path],
            out_degree=out_degree[path],
            purpose=describe_purpose(file_type, in_degree[path], out_degree[path]),
        ))
    return nodes


def assemble_graph(
    ranked: list[str],
    contents: Mapping[str, str],
    index: FileIndex,
    sizes: Mapping[str, int | None],
    *,
    node_cap: int = NODE_CAP,
    sanitize: Callable[[str], str] = lambda p: p,
) -> tuple[list[GraphNode], list[ResolvedEdge]]:
    """Full assembly: edges -> degree truncation -> node metadata."""
    edges, connected = collect_edges(ranked, contents, index)
    retained, final_edges = truncate_by_degree(edges, connected, node_cap)
    nodes = build_nodes(retained, final_edges, contents, sizes, sanitize)
    return nodes, final_edges
