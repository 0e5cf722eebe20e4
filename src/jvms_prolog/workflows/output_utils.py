"""Persist extracted specs and summarize a run."""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..core.keys import (
    K_BLOCKS,
    K_ERROR,
    K_FETCHED_AT,
    K_PATH,
    K_SPEC_SHA256,
    K_STATUS,
    K_URL,
    K_VERDICT,
    K_VERSION,
    V_DUPLICATE,
    V_FAILED,
    V_OK,
)
from .extractor_config import OUTPUT_FILENAME_PATTERN

logger = logging.getLogger(__name__)


def spec_filename(version: int) -> str:
    return OUTPUT_FILENAME_PATTERN.format(version=version)


def write_specs(specs: Mapping[int, str], output_folder: Path) -> Dict[int, Path]:
    """Write one ``jvms-<version>-prolog.pl`` per entry, overwriting existing files.

    OSError is not caught: a failed write aborts the run.
    """

    output_folder = Path(output_folder)
    output_folder.mkdir(parents=True, exist_ok=True)
    written: Dict[int, Path] = {}
    for version in sorted(specs):
        path = output_folder / spec_filename(version)
        path.write_text(specs[version], encoding="utf-8")
        logger.info("wrote %s (%d chars)", path, len(specs[version]))
        written[version] = path
    return written


def _iso(moment: datetime) -> str:
    return moment.replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _sha256(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def build_run_summary(
    results: Sequence,
    kept: Iterable,
    written: Mapping[int, Path],
    *,
    started_at: datetime,
    finished_at: datetime,
    settings: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    kept_versions = {r.version for r in kept}
    items: List[Dict[str, Any]] = []
    for result in sorted(results, key=lambda r: r.version):
        if result.spec is None:
            verdict = V_FAILED
        elif result.version in kept_versions:
            verdict = V_OK
        else:
            verdict = V_DUPLICATE
        path = written.get(result.version)
        items.append(
            {
                K_VERSION: result.version,
                K_URL: result.url,
                K_STATUS: result.status,
                K_VERDICT: verdict,
                K_ERROR: result.error,
                K_BLOCKS: result.blocks,
                K_SPEC_SHA256: _sha256(result.spec),
                K_PATH: str(path) if path is not None else None,
                K_FETCHED_AT: result.fetched_at,
            }
        )

    summary: Dict[str, Any] = {
        "started_at": _iso(started_at),
        "finished_at": _iso(finished_at),
        "duration_ms": int((finished_at - started_at).total_seconds() * 1000),
        "counts": {
            "requested": len(items),
            "fetched": sum(1 for item in items if item[K_VERDICT] != V_FAILED),
            "failed": sum(1 for item in items if item[K_VERDICT] == V_FAILED),
            "duplicates": sum(1 for item in items if item[K_VERDICT] == V_DUPLICATE),
            "written": len(written),
        },
        "items": items,
    }
    if settings:
        summary["settings"] = settings
    return summary


__all__ = [
    "build_run_summary",
    "spec_filename",
    "write_specs",
]
