from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup, FeatureNotFound

from .extractor_config import ENV_OUTPUT_DIR, ENV_VARS, LATEST_KNOWN_VERSION
from .runtime_utils import detect_java_feature_version


def _check_lxml_available() -> bool:
    try:
        BeautifulSoup("<p></p>", "lxml")
    except FeatureNotFound:
        return False
    return True


def _check_writable(path: Path) -> bool:
    try:
        if path.exists():
            return path.is_dir() and os.access(path, os.W_OK)
        parent = path.parent
        if not parent.exists():
            return False
        return os.access(parent, os.W_OK)
    except OSError:
        return False


def build_doctor_report(*, output_folder: Optional[Path] = None) -> Dict[str, Any]:
    report: Dict[str, Any] = {
        "generated_at": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
        "ok": True,
        "checks": [],
    }

    def add_check(
        name: str,
        status: bool,
        *,
        detail: Optional[str] = None,
        remedy: Optional[str] = None,
        level: str = "warn",
        value: Optional[str] = None,
    ) -> None:
        entry = {
            "name": name,
            "status": "ok" if status else "missing",
            "level": level,
            "detail": detail,
        }
        if remedy:
            entry["remedy"] = remedy
        if value is not None:
            entry["value"] = value
        report["checks"].append(entry)
        if not status and level in {"warn", "error"}:
            report["ok"] = False

    java_version = detect_java_feature_version()
    add_check(
        "java",
        java_version is not None,
        detail=(
            f"default end version {java_version}"
            if java_version is not None
            else f"no java on PATH; default end version {LATEST_KNOWN_VERSION}"
        ),
        remedy="Install a JDK or pass --end-version explicitly.",
        level="info",
    )

    add_check(
        "lxml",
        _check_lxml_available(),
        detail="HTML parser for BeautifulSoup",
        remedy="pip install lxml",
        level="error",
    )

    folder = Path(output_folder or os.getenv(ENV_OUTPUT_DIR) or ".")
    add_check(
        "output_folder",
        _check_writable(folder),
        detail=str(folder),
        remedy=f"Create the folder or set {ENV_OUTPUT_DIR} to a writable location.",
        level="warn",
    )

    for name in ENV_VARS:
        value = os.getenv(name)
        if value:
            add_check(name, True, detail="set", level="info", value=value)

    return report


def format_doctor_report(report: Dict[str, Any]) -> str:
    lines: List[str] = []
    lines.append("jvms-prolog doctor")
    lines.append(f"Generated: {report.get('generated_at')}")
    lines.append("")
    for check in report.get("checks", []):
        name = check.get("name", "check")
        status = check.get("status", "unknown")
        level = check.get("level", "info")
        detail = check.get("detail")
        value = check.get("value")
        label = f"{name}: {status}"
        if value:
            label = f"{label} ({value})"
        lines.append(f"- [{level}] {label}")
        if detail:
            lines.append(f"  detail: {detail}")
        remedy = check.get("remedy")
        if remedy and status != "ok":
            lines.append(f"  remedy: {remedy}")
    return "\n".join(lines).rstrip() + "\n"
