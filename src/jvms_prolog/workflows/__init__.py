"""High-level exports for the jvms_prolog workflows."""

from .corrections import CORRECTIONS, Correction, correct
from .dedup import deduplicate
from .listing_extract import ListingExtraction, SectionNotFoundError, extract_spec
from .output_utils import build_run_summary, write_specs
from .page_fetch import FetchConfig, PageFetcher, PageResult, fetch_page
from .pipeline import (
    ExtractorArguments,
    PipelineResult,
    VersionSpec,
    extract_version,
    resolve_arguments,
    run_extract_pipeline,
)

__all__ = [
    "CORRECTIONS",
    "Correction",
    "correct",
    "deduplicate",
    "ListingExtraction",
    "SectionNotFoundError",
    "extract_spec",
    "build_run_summary",
    "write_specs",
    "FetchConfig",
    "PageFetcher",
    "PageResult",
    "fetch_page",
    "ExtractorArguments",
    "PipelineResult",
    "VersionSpec",
    "extract_version",
    "resolve_arguments",
    "run_extract_pipeline",
]
