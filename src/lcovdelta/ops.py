"""Summary pipeline: read reports, parse, normalize, filter, diff, render.

File access lives here so the coverage package stays pure. The current
report is mandatory; a missing baseline only degrades to no-baseline mode.
"""

from __future__ import annotations

import os
from collections.abc import Collection
from dataclasses import dataclass
from pathlib import Path

import structlog

from lcovdelta.config.models import LcovDeltaConfig
from lcovdelta.core.errors import MalformedReportError, MissingBaselineError, MissingReportError
from lcovdelta.core.formatting import truncate_at_line
from lcovdelta.coverage import (
    CoverageReport,
    DiffResult,
    RenderOptions,
    diff,
    filter_changed,
    normalize_paths,
    normalize_report,
    parse,
    rebase_report,
    render,
    working_root,
)

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Summary:
    """Rendered summary plus the diff it was built from."""

    body: str
    result: DiffResult
    truncated: bool = False


def _read_text(path: Path, error: type[MissingReportError] | type[MissingBaselineError]) -> str:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise error.at(str(path)) from None
    except (OSError, UnicodeDecodeError) as e:
        raise error.at(str(path), str(e)) from e
    if not text.strip():
        raise error.at(str(path), "file is empty")
    return text


def read_report(path: Path) -> str:
    """Read the current report. Raises MissingReportError if absent or empty."""
    return _read_text(path, MissingReportError)


def read_baseline(path: Path | None) -> str | None:
    """Read the baseline report, or None (with a warning) if it can't be read."""
    if path is None:
        return None
    try:
        return _read_text(path, MissingBaselineError)
    except MissingBaselineError as e:
        log.warning("baseline.missing", error=e.error_name, **e.details)
        return None


def resolve_prefix(config: LcovDeltaConfig) -> str:
    """Prefix stripped from report paths: config, then $GITHUB_WORKSPACE, then cwd."""
    if config.report.prefix:
        return config.report.prefix
    if workspace := os.environ.get("GITHUB_WORKSPACE"):
        return workspace
    return str(Path(config.report.working_directory).resolve())


def resolve_working_root(config: LcovDeltaConfig, prefix: str) -> str:
    """Working directory relative to the prefix, '' when it is the prefix or outside it."""
    return working_root(str(Path(config.report.working_directory).resolve()), prefix)


def report_paths(config: LcovDeltaConfig) -> tuple[Path, Path | None]:
    """Current report path (inside working_directory) and optional baseline path."""
    current = Path(config.report.working_directory) / config.report.lcov_file
    baseline = Path(config.report.lcov_base) if config.report.lcov_base else None
    return current, baseline


def summarize_texts(
    current_text: str,
    baseline_text: str | None,
    config: LcovDeltaConfig,
    *,
    changed_files: Collection[str] | None = None,
    head: str | None = None,
    base: str | None = None,
) -> Summary:
    """Run the pipeline over report texts already in memory.

    Args:
        current_text: LCOV text of the current report.
        baseline_text: LCOV text of the baseline, or None for no-baseline mode.
        config: Loaded configuration.
        changed_files: Changed paths; only used when filter_changed_files is set.
        head: Label of the ref being reported on.
        base: Label of the ref it merges into.
    """
    prefix = resolve_prefix(config)
    root = resolve_working_root(config, prefix)
    if root:
        log.debug("paths.rebased", working_root=root)

    current = normalize_report(rebase_report(parse(current_text), root), prefix)
    baseline: CoverageReport | None = None
    if baseline_text is not None:
        try:
            baseline = normalize_report(rebase_report(parse(baseline_text), root), prefix)
        except MalformedReportError as e:
            log.warning("baseline.malformed", error=e.error_name, **e.details)

    filtering = config.report.filter_changed_files and changed_files is not None
    if filtering:
        current = filter_changed(
            current,
            normalize_paths(changed_files or (), prefix),
            empty_policy=config.report.empty_changed_policy,
        )

    result = diff(current, baseline)
    options = RenderOptions.from_config(
        config.render, head=head, base=base, changed_files_only=filtering
    )
    body = render(result, options)

    max_chars = config.render.max_chars
    truncated = truncate_at_line(body, max_chars)
    if truncated != body:
        log.warning("summary.truncated", length=len(body), max_chars=max_chars)
        return Summary(body=truncated, result=result, truncated=True)

    return Summary(body=body, result=result)


def summarize(
    config: LcovDeltaConfig,
    *,
    changed_files: Collection[str] | None = None,
    head: str | None = None,
    base: str | None = None,
) -> Summary:
    """Read the configured reports and build the summary.

    Raises:
        MissingReportError: If the current report can't be read.
    """
    current_path, baseline_path = report_paths(config)
    current_text = read_report(current_path)
    baseline_text = read_baseline(baseline_path)
    log.info(
        "summary.inputs",
        lcov_file=str(current_path),
        lcov_base=str(baseline_path) if baseline_path else None,
        baseline=baseline_text is not None,
    )
    return summarize_texts(
        current_text,
        baseline_text,
        config,
        changed_files=changed_files,
        head=head,
        base=base,
    )
