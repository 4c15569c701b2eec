"""Batch content fetcher -- fixed-width concurrent groups, per-file failure isolation."""

from __future__ import annotations

import asyncio
import logging

from .providers import ContentProvider

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10


async def fetch_contents(
    provider: ContentProvider,
    owner: str,
    repo: str,
    branch: str,
    paths: list[str],
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> dict[str, str]:
    """Fetch *paths* in groups of *batch_size* and return ``{path: text}``.

    A file whose fetch raises or returns an empty string is left out of the
    result; nothing here aborts the batch.
    """
    width = max(1, batch_size)
    contents: dict[str, str] = {}
    failed = 0

    for start in range(0, len(paths), width):
        batch = paths[start:start + width]
        results = await asyncio.gather(
            *(provider.fetch_content(owner, repo, p, branch) for p in batch),
            return_exceptions=True,
        )
        for path, result in zip(batch, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result  # cancellation / interpreter exit
                failed += 1
                logger.debug("Content fetch failed for %s: %s", path, result)
                continue
            if isinstance(result, str) and result:
                contents[path] = result

    if failed:
        logger.info("Fetched %d/%d files (%d failed).", len(contents), len(paths), failed)
    return contents
