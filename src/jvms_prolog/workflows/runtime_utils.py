"""Helpers for discovering the local Java runtime."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from typing import Optional

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r'version\s+"([^"]+)"')


def parse_feature_version(version: str) -> Optional[int]:
    """Return the feature release of a Java version string.

    ``"21.0.2"`` -> 21, ``"1.8.0_392"`` -> 8, ``"25-ea"`` -> 25.
    """

    match = re.match(r"(\d+)(?:\.(\d+))?", (version or "").strip())
    if not match:
        return None
    major = int(match.group(1))
    if major == 1 and match.group(2) is not None:
        return int(match.group(2))
    return major


def detect_java_feature_version(java: str = "java") -> Optional[int]:
    """Feature version of the ``java`` on PATH, or None when unavailable."""

    executable = shutil.which(java)
    if executable is None:
        return None
    try:
        proc = subprocess.run(
            [executable, "-version"],
            capture_output=True,
            text=True,
            timeout=15,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.debug("java -version failed: %s", exc)
        return None
    # The version banner goes to stderr.
    match = _VERSION_RE.search(proc.stderr or proc.stdout or "")
    if not match:
        return None
    return parse_feature_version(match.group(1))


__all__ = [
    "detect_java_feature_version",
    "parse_feature_version",
]
