"""FastAPI server exposing the dependency-graph pipeline."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..models import RepographConfig
from ..pipeline import INTERNAL_ERROR, FlowchartPipeline, build_pipeline

logger = logging.getLogger(__name__)

app = FastAPI(title="repograph", version="0.1.0")

# Set by start_server() (or tests) before the first request.
_pipeline: FlowchartPipeline | None = None
_config: RepographConfig | None = None


def _get_pipeline() -> FlowchartPipeline:
    """Return the configured pipeline, building a default one on first use."""
    global _pipeline
    if _pipeline is None:
        _pipeline = build_pipeline(_config)
    return _pipeline


class FlowchartRequest(BaseModel):
    owner: str | None = None
    repo: str | None = None
    branch: str | None = None


@app.get("/api/health")
async def health() -> JSONResponse:
    return JSONResponse({"status": "ok"})


@app.post("/api/repo/flowchart")
async def flowchart(req: FlowchartRequest) -> JSONResponse:
    owner = (req.owner or "").strip()
    repo = (req.repo or "").strip()
    if not owner or not repo:
        return JSONResponse({"error": "Missing required parameters"}, status_code=400)

    try:
        payload = await _get_pipeline().handle(owner, repo, (req.branch or "").strip() or None)
    except Exception as exc:
        logger.exception("Flowchart request failed for %s/%s", owner, repo)
        payload = {"success": False, "error": INTERNAL_ERROR, "message": str(exc)}

    status = 200 if payload.get("success") else 500
    return JSONResponse(payload, status_code=status)


def start_server(
    config: RepographConfig,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> None:
    """Start the API server with a pipeline built from *config*."""
    import uvicorn

    global _pipeline, _config
    _config = config
    _pipeline = build_pipeline(config)

    uvicorn.run(app, host=host, port=port)
