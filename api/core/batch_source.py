"""
External sheet batch source.

The batch list lives outside the nesting database. It is read from one of:
- `BATCH_SOURCE_URL`  -> GET, JSON array of batch objects (or {"batches": [...]})
- `BATCH_SOURCE_PATH` -> JSON file with the same shape

Fetching is potentially slow; callers cache the result (see `batches/service.py`).
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any

import httpx

from .errors import SourceUnavailable

DEFAULT_TIMEOUT_S = 30.0


def batch_source_url() -> str:
    return os.environ.get("BATCH_SOURCE_URL", "").strip()


def batch_source_path() -> str:
    return os.environ.get("BATCH_SOURCE_PATH", "").strip()


def batch_source_timeout_s() -> float:
    raw = os.environ.get("BATCH_SOURCE_TIMEOUT_S", "").strip()
    if not raw:
        return DEFAULT_TIMEOUT_S
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_S
    return value if value > 0 else DEFAULT_TIMEOUT_S


def _unwrap(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, dict):
        data = data.get("batches")
    if not isinstance(data, list):
        raise SourceUnavailable("Batch source returned no batch list.")
    if not all(isinstance(item, dict) for item in data):
        raise SourceUnavailable("Batch source returned a non-object batch entry.")
    return data


async def fetch_from_url(
    url: str,
    *,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    try:
        async with httpx.AsyncClient(timeout=timeout_s, transport=transport) as client:
            resp = await client.get(url)
    except httpx.HTTPError as e:
        raise SourceUnavailable(f"Batch source request failed: {e}") from e

    if resp.status_code != 200:
        # Avoid dumping huge bodies; include a small snippet.
        body = resp.text[:500]
        raise SourceUnavailable(f"Batch source request failed: {resp.status_code} {body}")

    try:
        data = resp.json()
    except ValueError as e:
        raise SourceUnavailable("Batch source returned invalid JSON.") from e
    return _unwrap(data)


def _read_file(path: str) -> Any:
    with Path(path).open(encoding="utf-8") as fh:
        return json.load(fh)


async def fetch_from_file(path: str) -> list[dict[str, Any]]:
    try:
        data = await asyncio.to_thread(_read_file, path)
    except OSError as e:
        raise SourceUnavailable(f"Could not read batch file {path}: {e}") from e
    except ValueError as e:
        raise SourceUnavailable(f"Batch file {path} is not valid JSON.") from e
    return _unwrap(data)


async def fetch_batches() -> list[dict[str, Any]]:
    """
    Return the current full batch list as raw objects.
    """
    url = batch_source_url()
    if url:
        return await fetch_from_url(url, timeout_s=batch_source_timeout_s())

    path = batch_source_path()
    if path:
        return await fetch_from_file(path)

    raise SourceUnavailable("No batch source configured. Set BATCH_SOURCE_URL or BATCH_SOURCE_PATH.")
