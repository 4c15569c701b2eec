"""Repograph - Cross-language dependency graphs for GitHub repositories."""

from .models import (  # noqa: F401 -- public re-exports
    FileEntry,
    FlowchartResult,
    FlowchartStats,
    GraphMode,
    GraphNode,
    Language,
    RepographConfig,
    ResolvedEdge,
)
from .pipeline import FlowchartPipeline, build_pipeline

__version__ = "0.1.0"

__all__ = [
    "FlowchartPipeline",
    "build_pipeline",
    "FileEntry",
    "FlowchartResult",
    "FlowchartStats",
    "GraphMode",
    "GraphNode",
    "Language",
    "RepographConfig",
    "ResolvedEdge",
]
