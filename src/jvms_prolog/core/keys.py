"""Shared summary keys to avoid magic strings across jvms_prolog modules."""

from __future__ import annotations

# Per-version item keys
K_VERSION = "version"
K_URL = "url"
K_STATUS = "status"
K_VERDICT = "verdict"
K_ERROR = "error"
K_BLOCKS = "blocks"
K_SPEC_SHA256 = "spec_sha256"
K_PATH = "path"
K_FETCHED_AT = "fetched_at"

# Verdicts
V_OK = "ok"
V_FAILED = "failed"
V_DUPLICATE = "duplicate"
