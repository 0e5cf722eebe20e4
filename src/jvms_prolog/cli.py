from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from dotenv import find_dotenv, load_dotenv

from .workflows.doctor import build_doctor_report, format_doctor_report
from .workflows.pipeline import (
    extract_version,
    plan_urls,
    resolve_arguments,
    run_extract_pipeline,
)

app = typer.Typer(add_help_option=False, no_args_is_help=False)


def _minimal_help() -> str:
    return """jvms-prolog

Usage:
  jvms-prolog extract [--start-version N] [--end-version N] [--url TEMPLATE] [--out DIR]
                      [--keep-duplicates] [--no-corrections] [--dedup adjacent|global]
                      [--json] [--dry-run] [--strict]
  jvms-prolog show <version> [--url TEMPLATE] [--no-corrections]
  jvms-prolog doctor

Common options:
  --out <DIR>         Write jvms-<version>-prolog.pl files into this directory.
  --keep-duplicates   Write every version even when its listings repeat.
  --dedup <POLICY>    adjacent (default) or global duplicate detection.
  --json              Print the run summary JSON to stdout.
  --dry-run           Print the URLs that would be fetched and exit.

Discoverability:
  --help-full     Expanded help + env vars + outputs.
  --find <query>  Search commands, flags, env vars, outputs.
  --doctor        Run environment diagnostics and exit.
"""


def _help_full() -> str:
    return """jvms-prolog (verifier listing extractor)

Commands:
  extract   Fetch a range of JVMS versions and write one Prolog file per version.
  show      Print the extracted listings of a single version to stdout.
  doctor    Print environment and dependency diagnostics.

Deduplication (--dedup):
  adjacent  Skip a version whose listings equal the previous written version.
  global    Skip a version whose listings equal any earlier written version.

Outputs:
  jvms-<version>-prolog.pl  Newline-joined verifier listings, errata corrected.

Environment (CLI options take precedence):
  JVMS_START_VERSION
  JVMS_END_VERSION
  JVMS_URL_TEMPLATE
  JVMS_OUTPUT_DIR
  JVMS_KEEP_DUPLICATES
  JVMS_APPLY_CORRECTIONS
  JVMS_DEDUP_POLICY
  JVMS_USER_AGENT
  A .env file in the working directory is loaded at startup.

Exit codes:
  0  Done (versions that failed to fetch or parse are reported, not fatal).
  1  show could not extract the requested version.
  2  Invalid configuration.
  3  Fatal error while writing, or --strict with at least one failed version.
"""


_FIND_INDEX = [
    ("command", "extract", "Fetch a version range and write Prolog files."),
    ("command", "show", "Print one version's listings to stdout."),
    ("command", "doctor", "Print environment and dependency diagnostics."),
    ("flag", "--start-version", "First JVMS version (default 7)."),
    ("flag", "--end-version", "Last JVMS version (default: local java feature version)."),
    ("flag", "--url", "URL template with a %s version placeholder."),
    ("flag", "--out", "Output folder for jvms-<version>-prolog.pl files."),
    ("flag", "--keep-duplicates", "Write versions whose listings repeat."),
    ("flag", "--no-corrections", "Keep the published listings as-is."),
    ("flag", "--dedup", "Duplicate policy: adjacent or global."),
    ("flag", "--json", "Print the run summary JSON to stdout."),
    ("flag", "--dry-run", "Print planned URLs without fetching."),
    ("flag", "--strict", "Exit 3 when any version fails."),
    ("flag", "--verbose", "Debug logging (errata hits, skipped duplicates)."),
    ("flag", "--help-full", "Expanded help, env vars, outputs."),
    ("flag", "--find", "Search commands, flags, env vars, outputs."),
    ("flag", "--doctor", "Run environment diagnostics and exit."),
    ("env", "JVMS_START_VERSION", "Default first version."),
    ("env", "JVMS_END_VERSION", "Default last version."),
    ("env", "JVMS_URL_TEMPLATE", "Default URL template."),
    ("env", "JVMS_OUTPUT_DIR", "Default output folder."),
    ("env", "JVMS_KEEP_DUPLICATES", "Keep duplicate versions when truthy."),
    ("env", "JVMS_APPLY_CORRECTIONS", "Apply errata corrections (default on)."),
    ("env", "JVMS_DEDUP_POLICY", "adjacent or global."),
    ("env", "JVMS_USER_AGENT", "HTTP User-Agent header."),
    ("output", "jvms-<version>-prolog.pl", "Extracted listings for one version."),
]


def _run_find(query: str) -> str:
    needle = (query or "").strip().lower()
    if not needle:
        return ""
    lines = []
    for category, name, desc in _FIND_INDEX:
        haystack = f"{category} {name} {desc}".lower()
        if needle in haystack:
            lines.append(f"{category} {name} - {desc}")
    return "\n".join(lines)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    help: bool = typer.Option(False, "--help", "-h", is_eager=True, help="Show minimal help."),
    help_full: bool = typer.Option(False, "--help-full", is_eager=True, help="Show expanded help."),
    find: Optional[str] = typer.Option(None, "--find", is_eager=True, help="Search commands, flags, env vars, outputs."),
    doctor: bool = typer.Option(False, "--doctor", is_eager=True, help="Run environment diagnostics and exit."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    load_dotenv(find_dotenv(usecwd=True))
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")
    if help_full:
        typer.echo(_help_full())
        raise typer.Exit(code=0)
    if find is not None:
        output = _run_find(find)
        if output:
            typer.echo(output)
        raise typer.Exit(code=0)
    if doctor:
        report = build_doctor_report()
        typer.echo(format_doctor_report(report))
        raise typer.Exit(code=0 if report.get("ok", True) else 2)
    if help or ctx.invoked_subcommand is None:
        typer.echo(_minimal_help())
        raise typer.Exit(code=0)


@app.command("doctor", add_help_option=True)
def doctor_cmd(
    out: Optional[Path] = typer.Option(None, "--out", help="Output folder to check for write access."),
) -> None:
    """Print environment and dependency diagnostics."""
    report = build_doctor_report(output_folder=out)
    typer.echo(format_doctor_report(report))
    raise typer.Exit(code=0 if report.get("ok", True) else 2)


@app.command("extract", add_help_option=True)
def extract_cmd(
    start_version: Optional[int] = typer.Option(None, "--start-version", help="First JVMS version (default 7)."),
    end_version: Optional[int] = typer.Option(None, "--end-version", help="Last JVMS version (default: local java)."),
    url: Optional[str] = typer.Option(None, "--url", help="URL template with a %s version placeholder."),
    out: Optional[Path] = typer.Option(None, "--out", "--output-folder", help="Output folder."),
    keep_duplicates: Optional[bool] = typer.Option(
        None, "--keep-duplicates/--drop-duplicates", help="Write versions whose listings repeat."
    ),
    corrections: Optional[bool] = typer.Option(
        None, "--corrections/--no-corrections", help="Apply known errata corrections."
    ),
    dedup: Optional[str] = typer.Option(None, "--dedup", help="Duplicate policy: adjacent or global."),
    json_out: bool = typer.Option(False, "--json", help="Print the run summary JSON to stdout."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print planned URLs without fetching."),
    strict: bool = typer.Option(False, "--strict", help="Exit 3 when any version fails."),
) -> None:
    """Fetch a range of versions and write one Prolog file per distinct spec."""
    try:
        args = resolve_arguments(
            start_version=start_version,
            end_version=end_version,
            url_template=url,
            output_folder=out,
            keep_duplicates=keep_duplicates,
            apply_corrections=corrections,
            dedup_policy=dedup,
        )
        plan = plan_urls(args)
    except ValueError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2)

    if dry_run:
        for version, version_url in plan:
            typer.echo(f"{version}\t{version_url}")
        raise typer.Exit(code=0)

    try:
        result = run_extract_pipeline(args)
    except Exception as exc:
        if not json_out:
            typer.echo(f"fatal: {exc}", err=True)
        raise typer.Exit(code=3)

    if json_out:
        sys.stdout.write(json.dumps(result.summary, ensure_ascii=False) + "\n")
    for failed in result.failed:
        if not json_out:
            typer.echo(f"[jvms-prolog] version {failed.version} skipped: {failed.error}", err=True)
    raise typer.Exit(code=3 if strict and result.failed else 0)


@app.command("show", add_help_option=True)
def show_cmd(
    version: int = typer.Argument(..., help="JVMS version to extract."),
    url: Optional[str] = typer.Option(None, "--url", help="URL template with a %s version placeholder."),
    corrections: Optional[bool] = typer.Option(
        None, "--corrections/--no-corrections", help="Apply known errata corrections."
    ),
) -> None:
    """Print the extracted listings of one version to stdout."""
    try:
        args = resolve_arguments(
            start_version=version,
            end_version=version,
            url_template=url,
            apply_corrections=corrections,
        )
        spec = extract_version(version, args.url_template, args.apply_corrections)
    except ValueError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2)
    if not spec.ok:
        typer.echo(f"error: version {version}: {spec.error}", err=True)
        raise typer.Exit(code=1)
    typer.echo(spec.spec)
