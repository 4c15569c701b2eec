"""HTTP surface for the dependency-graph pipeline."""

from .server import app, start_server

__all__ = ["app", "start_server"]
