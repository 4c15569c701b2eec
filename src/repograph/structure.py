"""Folder-structure fallback -- a directory graph for repos with no resolvable imports."""

from __future__ import annotations

import posixpath
from collections import Counter, deque
from collections.abc import Callable

from .models import GraphNode, ResolvedEdge
from .presentation import classify_file, describe_folder, describe_purpose

MAX_STRUCTURE_NODES = 60
# Below this many directory nodes, top-level files are added as leaves.
SPARSE_DIRECTORY_COUNT = 8
LOOSE_FILE_MAX_DEPTH = 2


def _directory_tree(all_files: list[str]) -> tuple[dict[str, list[str]], dict[str, int]]:
    """Return ``(children, file_counts)`` over every directory, ancestors included.

    Children lists keep first-seen order; the root is ``""``.
    """
    children: dict[str, list[str]] = {"": []}
    file_counts: dict[str, int] = {}
    for path in all_files:
        directory = posixpath.dirname(path)
        file_counts[directory] = file_counts.get(directory, 0) + 1
        # Register the chain of ancestors without recursion.
        chain: list[str] = []
        while directory and directory not in children:
            chain.append(directory)
            directory = posixpath.dirname(directory)
        for d in reversed(chain):
            children[d] = []
            children[posixpath.dirname(d)].append(d)
    return children, file_counts


def build_folder_graph(
    all_files: list[str],
    max_nodes: int = MAX_STRUCTURE_NODES,
    sanitize: Callable[[str], str] = lambda p: p,
) -> tuple[list[GraphNode], list[ResolvedEdge]]:
    """Directory-level graph: breadth-first (depth-ascending), capped at *max_nodes*."""
    children, file_counts = _directory_tree(all_files)

    ordered: list[str] = []
    queue: deque[str] = deque(children[""])
    while queue and len(ordered) < max_nodes:
        directory = queue.popleft()
        ordered.append(directory)
        queue.extend(children[directory])

    nodes: list[GraphNode] = []
    edges: list[ResolvedEdge] = []
    retained: set[str] = set()

    for directory in ordered:
        file_type, color = classify_file(directory + "/")
        count = file_counts.get(directory, 0)
        nodes.append(GraphNode(
            id=directory,
            label=posixpath.basename(directory) + "/",
            full_path=sanitize(directory),
            file_type=file_type,
            color=color,
            purpose=describe_folder(count),
            is_folder=True,
            file_count=count,
        ))
        retained.add(directory)
        parent = posixpath.dirname(directory)
        if parent in retained:
            edges.append(ResolvedEdge.between(parent, directory))

    if len(nodes) < SPARSE_DIRECTORY_COUNT:
        budget = max_nodes - len(nodes)
        loose = [p for p in all_files if p.count("/") < LOOSE_FILE_MAX_DEPTH][:budget]
        for path in loose:
            file_type, color = classify_file(path)
            parent = posixpath.dirname(path)
            nodes.append(GraphNode(
                id=path,
                label=posixpath.basename(path),
                full_path=sanitize(path),
                file_type=file_type,
                color=color,
            ))
            if parent in retained:
                edges.append(ResolvedEdge.between(parent, path))

    in_degree = Counter(e.target for e in edges)
    out_degree = Counter(e.source for e in edges)
    for node in nodes:
        node.in_degree = in_degree[node.id]
        node.out_degree = out_degree[node.id]
        if not node.is_folder:
            node.purpose = describe_purpose(node.file_type, node.in_degree, node.out_degree)

    return nodes, edges
