"""Fetch, extract, deduplicate and write the JVMS verifier listings."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .dedup import deduplicate
from .extractor_config import (
    DEDUP_ADJACENT,
    DEDUP_POLICIES,
    DEFAULT_START_VERSION,
    DEFAULT_URL_TEMPLATE,
    ENV_APPLY_CORRECTIONS,
    ENV_DEDUP_POLICY,
    ENV_END_VERSION,
    ENV_KEEP_DUPLICATES,
    ENV_OUTPUT_DIR,
    ENV_START_VERSION,
    ENV_URL_TEMPLATE,
    ENV_USER_AGENT,
    LATEST_KNOWN_VERSION,
    URL_PLACEHOLDER,
)
from .listing_extract import SectionNotFoundError, extract_spec
from .output_utils import build_run_summary, write_specs
from .page_fetch import FetchConfig, PageFetcher, PageResult, fetch_page
from .runtime_utils import detect_java_feature_version

logger = logging.getLogger(__name__)


def _env_int(name: str, default: Optional[int] = None) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_bool(name: str, default: str = "0") -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        raw = default
    return str(raw).strip().lower() not in {"0", "false", "no", "off", ""}


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    return raw.strip() if raw and raw.strip() else default


@dataclass(frozen=True, slots=True)
class ExtractorArguments:
    start_version: int = DEFAULT_START_VERSION
    end_version: int = LATEST_KNOWN_VERSION
    url_template: str = DEFAULT_URL_TEMPLATE
    output_folder: Path = Path(".")
    keep_duplicates: bool = False
    apply_corrections: bool = True
    dedup_policy: str = DEDUP_ADJACENT

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["output_folder"] = str(self.output_folder)
        return payload


def default_end_version() -> int:
    detected = detect_java_feature_version()
    if detected is None:
        logger.debug("no java runtime found; using %d as end version", LATEST_KNOWN_VERSION)
        return LATEST_KNOWN_VERSION
    return detected


def resolve_arguments(
    *,
    start_version: Optional[int] = None,
    end_version: Optional[int] = None,
    url_template: Optional[str] = None,
    output_folder: Optional[Path] = None,
    keep_duplicates: Optional[bool] = None,
    apply_corrections: Optional[bool] = None,
    dedup_policy: Optional[str] = None,
) -> ExtractorArguments:
    """Merge explicit values over JVMS_* environment variables over defaults."""

    start = start_version if start_version is not None else _env_int(ENV_START_VERSION, DEFAULT_START_VERSION)
    end = end_version if end_version is not None else _env_int(ENV_END_VERSION)
    if end is None:
        end = default_end_version()
    template = url_template or _env_str(ENV_URL_TEMPLATE, DEFAULT_URL_TEMPLATE)
    folder = output_folder if output_folder is not None else Path(_env_str(ENV_OUTPUT_DIR, "."))
    keep = keep_duplicates if keep_duplicates is not None else _env_bool(ENV_KEEP_DUPLICATES, "0")
    corrections = apply_corrections if apply_corrections is not None else _env_bool(ENV_APPLY_CORRECTIONS, "1")
    policy = (dedup_policy or _env_str(ENV_DEDUP_POLICY, DEDUP_ADJACENT)).lower()
    if policy not in DEDUP_POLICIES:
        raise ValueError(f"Unknown dedup policy {policy!r}; expected one of {', '.join(DEDUP_POLICIES)}")
    return ExtractorArguments(
        start_version=start,
        end_version=end,
        url_template=template,
        output_folder=Path(folder),
        keep_duplicates=keep,
        apply_corrections=corrections,
        dedup_policy=policy,
    )


def fetch_config_from_env() -> FetchConfig:
    config = FetchConfig()
    config.user_agent = _env_str(ENV_USER_AGENT, config.user_agent)
    return config


@dataclass(frozen=True)
class VersionSpec:
    """Extraction outcome for one JVM version; ``spec`` is None on failure."""

    version: int
    spec: Optional[str]
    url: str = ""
    status: int = -1
    error: Optional[str] = None
    blocks: int = 0
    fetched_at: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.spec is not None


def version_range(start: int, end: int) -> List[int]:
    if start > end:
        raise ValueError(f"start version {start} is after end version {end}")
    return list(range(start, end + 1))


def build_url(template: str, version: int) -> str:
    if URL_PLACEHOLDER in template:
        return template.replace(URL_PLACEHOLDER, str(version))
    if "{version}" in template:
        return template.replace("{version}", str(version))
    raise ValueError(f"URL template has no {URL_PLACEHOLDER} placeholder: {template}")


def plan_urls(args: ExtractorArguments) -> List[Tuple[int, str]]:
    return [(v, build_url(args.url_template, v)) for v in version_range(args.start_version, args.end_version)]


def spec_from_page(version: int, page: PageResult, apply_corrections: bool = True) -> VersionSpec:
    """Turn a fetched page into a VersionSpec; failures are tagged, not raised."""

    if not page.ok:
        return VersionSpec(
            version=version,
            spec=None,
            url=page.url,
            status=page.status,
            error=page.error,
            fetched_at=page.fetched_at,
        )
    try:
        extraction = extract_spec(page.html, apply_corrections)
    except SectionNotFoundError as exc:
        logger.warning("version %s: could not parse %s: %s", version, page.url, exc)
        return VersionSpec(
            version=version,
            spec=None,
            url=page.url,
            status=page.status,
            error=f"section_not_found: {exc}",
            fetched_at=page.fetched_at,
        )
    return VersionSpec(
        version=version,
        spec=extraction.text,
        url=page.url,
        status=page.status,
        blocks=extraction.blocks,
        fetched_at=page.fetched_at,
    )


async def collect_version_specs(
    args: ExtractorArguments,
    fetcher: Optional[PageFetcher] = None,
) -> List[VersionSpec]:
    plan = plan_urls(args)
    fetcher = fetcher or PageFetcher(fetch_config_from_env())
    pages = await fetcher.fetch_many([url for _, url in plan])
    return [
        spec_from_page(version, page, args.apply_corrections)
        for (version, _), page in zip(plan, pages)
    ]


@dataclass
class PipelineResult:
    results: List[VersionSpec]
    kept: List[VersionSpec]
    written: Dict[int, Path]
    summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def specs(self) -> Dict[int, str]:
        return {r.version: r.spec for r in self.kept}

    @property
    def failed(self) -> List[VersionSpec]:
        return [r for r in self.results if not r.ok]


def run_extract_pipeline(
    args: ExtractorArguments,
    fetcher: Optional[PageFetcher] = None,
) -> PipelineResult:
    started_at = datetime.now(timezone.utc)
    results = asyncio.run(collect_version_specs(args, fetcher))

    successes = [r for r in results if r.ok]
    kept = deduplicate(successes, keep_duplicates=args.keep_duplicates, policy=args.dedup_policy)
    specs = {r.version: r.spec for r in kept}
    written = write_specs(specs, args.output_folder)

    finished_at = datetime.now(timezone.utc)
    summary = build_run_summary(
        results,
        kept,
        written,
        started_at=started_at,
        finished_at=finished_at,
        settings=args.to_dict(),
    )
    logger.info(
        "versions %s-%s: %d fetched, %d failed, %d written",
        args.start_version,
        args.end_version,
        len(successes),
        len(results) - len(successes),
        len(written),
    )
    return PipelineResult(results=results, kept=kept, written=written, summary=summary)


def extract_version(
    version: int,
    url_template: str = DEFAULT_URL_TEMPLATE,
    apply_corrections: bool = True,
    config: Optional[FetchConfig] = None,
) -> VersionSpec:
    url = build_url(url_template, version)
    page = fetch_page(url, config or fetch_config_from_env())
    return spec_from_page(version, page, apply_corrections)


__all__ = [
    "ExtractorArguments",
    "PipelineResult",
    "VersionSpec",
    "build_url",
    "collect_version_specs",
    "default_end_version",
    "extract_version",
    "fetch_config_from_env",
    "plan_urls",
    "resolve_arguments",
    "run_extract_pipeline",
    "spec_from_page",
    "version_range",
]
