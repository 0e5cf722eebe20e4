"""Extractor defaults (source URL, page anchors, selectors, output naming).

Centralizes static defaults so the pipeline has no embedded magic strings.
Callers override any of these through ExtractorArguments or JVMS_* env vars.
"""

from __future__ import annotations

# Source pages
DEFAULT_URL_TEMPLATE = "https://docs.oracle.com/javase/specs/jvms/se%s/html/jvms-4.html#jvms-4.10"
URL_PLACEHOLDER = "%s"
DEFAULT_START_VERSION = 7
# Used as the end of the range when no java runtime is found on PATH.
LATEST_KNOWN_VERSION = 25

# HTTP
DEFAULT_USER_AGENT = "jvms-prolog/0.1 (+https://docs.oracle.com/javase/specs/)"
DEFAULT_ACCEPT_LANGUAGE = "en-US,en;q=0.9"

# Page layout
VERIFIER_ANCHOR = "jvms-4.10"
SECTION_SELECTOR = "div.section"
LISTING_SELECTOR = "pre.programlisting"
# The last listings of 4.10 are appendix material (not rules). This mirrors the
# page layout published for SE 7 through the current release and must be
# revisited if Oracle restructures the chapter.
TRAILING_APPENDIX_BLOCKS = 3
NON_PROLOG_MARKERS = ("Verification type hierarchy:",)

# Output
OUTPUT_FILENAME_PATTERN = "jvms-{version}-prolog.pl"

# Dedup policies
DEDUP_ADJACENT = "adjacent"
DEDUP_GLOBAL = "global"
DEDUP_POLICIES = (DEDUP_ADJACENT, DEDUP_GLOBAL)

# Environment variables
ENV_START_VERSION = "JVMS_START_VERSION"
ENV_END_VERSION = "JVMS_END_VERSION"
ENV_URL_TEMPLATE = "JVMS_URL_TEMPLATE"
ENV_OUTPUT_DIR = "JVMS_OUTPUT_DIR"
ENV_KEEP_DUPLICATES = "JVMS_KEEP_DUPLICATES"
ENV_APPLY_CORRECTIONS = "JVMS_APPLY_CORRECTIONS"
ENV_DEDUP_POLICY = "JVMS_DEDUP_POLICY"
ENV_USER_AGENT = "JVMS_USER_AGENT"

ENV_VARS = (
    ENV_START_VERSION,
    ENV_END_VERSION,
    ENV_URL_TEMPLATE,
    ENV_OUTPUT_DIR,
    ENV_KEEP_DUPLICATES,
    ENV_APPLY_CORRECTIONS,
    ENV_DEDUP_POLICY,
    ENV_USER_AGENT,
)
