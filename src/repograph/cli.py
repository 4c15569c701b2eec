"""CLI entry point for repograph -- dependency graphs for GitHub repositories."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import ConfigError, load_config
from .models import RepographConfig

app = typer.Typer(
    name="repograph",
    help="Cross-language dependency graphs for GitHub repositories.",
    add_completion=False,
)

console = Console()


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _load_dotenv(start_dir: Path) -> None:
    """Load a .env file from *start_dir* (or parents) into os.environ.

    Only sets vars that are not already present in the environment.
    Handles KEY=VALUE lines, ignores comments and blank lines.
    """
    search = start_dir.resolve()
    for d in [search, *search.parents]:
        candidate = d / ".env"
        if candidate.is_file():
            try:
                for line in candidate.read_text(encoding="utf-8").splitlines():
                    line = line.strip()
                    if not line or line.startswith("#"):
                        continue
                    if "=" not in line:
                        continue
                    key, _, value = line.partition("=")
                    key = key.strip()
                    value = value.strip().strip("\"'")
                    if key and key not in os.environ:
                        os.environ[key] = value
            except OSError:
                pass
            return  # stop after the first .env found


def _setup_logging(verbose: bool) -> None:
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config_or_exit(config_path: Path | None, **overrides) -> RepographConfig:
    _load_dotenv(Path.cwd())
    try:
        return load_config(config_path, **overrides)
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def graph(
    owner: str = typer.Argument(..., help="Repository owner (user or organisation)."),
    repo: str = typer.Argument(..., help="Repository name."),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Branch to analyse (default: main)."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload."),
    max_files: Optional[int] = typer.Option(None, "--max-files", help="Files to fetch and parse."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to repograph.toml."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Compute the dependency graph of OWNER/REPO."""
    from .pipeline import build_pipeline

    _setup_logging(verbose)
    cfg = _load_config_or_exit(config_path, max_analyzed_files=max_files)
    pipeline = build_pipeline(cfg)

    payload = asyncio.run(pipeline.handle(owner, repo, branch))

    if as_json:
        typer.echo(json.dumps(payload, indent=2))
        if not payload.get("success"):
            raise typer.Exit(code=1)
        return

    if not payload.get("success"):
        console.print(f"[red]Error:[/red] {payload.get('message', 'unknown failure')}")
        raise typer.Exit(code=1)

    stats = payload["stats"]
    mode = payload["mode"]
    console.print(
        f"[bold]{owner}/{repo}[/bold]  mode=[cyan]{mode}[/cyan]  "
        f"files={stats['totalFiles']}  analysed={stats['analyzedFiles']}  "
        f"edges={stats['resolvedEdges']}"
    )
    if mode == "empty":
        console.print("[yellow]Repository or branch not found, or it has no files.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Node")
    table.add_column("Type")
    table.add_column("Imports", justify="right")
    table.add_column("Imported by", justify="right")
    table.add_column("Purpose")
    ranked = sorted(payload["nodes"], key=lambda n: n["importedBy"] + n["imports"], reverse=True)
    for node in ranked[:25]:
        table.add_row(
            node["id"],
            node["fileType"],
            str(node["imports"]),
            str(node["importedBy"]),
            node["purpose"],
        )
    console.print(table)
    if len(ranked) > 25:
        console.print(f"[dim]... and {len(ranked) - 25} more nodes (use --json for all).[/dim]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address."),
    port: int = typer.Option(8000, "--port", "-p", help="Port number."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to repograph.toml."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Serve the graph API over HTTP."""
    from .web.server import start_server

    _setup_logging(verbose)
    cfg = _load_config_or_exit(config_path)
    if not cfg.github_token:
        console.print("[yellow]GITHUB_TOKEN not set; unauthenticated rate limits apply.[/yellow]")

    console.print(f"[bold cyan]Serving[/bold cyan] http://{host}:{port}/api/repo/flowchart")
    start_server(cfg, host=host, port=port)
