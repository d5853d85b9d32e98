"""LCOV parsing, path normalization, change filtering, diffing and rendering.

Usage:
    from lcovdelta.coverage import parse, normalize_report, diff, render

    current = normalize_report(parse(text), prefix="/home/runner/work/repo")
    result = diff(current, baseline)
    body = render(result, RenderOptions(title="Coverage"))
"""

from lcovdelta.coverage.diff import diff
from lcovdelta.coverage.filter import filter_changed
from lcovdelta.coverage.lcov import parse
from lcovdelta.coverage.models import (
    Coverage,
    CoverageReport,
    DiffEntry,
    DiffResult,
    FileRecord,
    Metric,
    Stats,
)
from lcovdelta.coverage.paths import (
    normalize_path,
    normalize_paths,
    normalize_report,
    rebase_report,
    working_root,
)
from lcovdelta.coverage.report import RenderOptions, compress_ranges, render

__all__ = [
    # Models
    "Coverage",
    "CoverageReport",
    "DiffEntry",
    "DiffResult",
    "FileRecord",
    "Metric",
    "Stats",
    # Pipeline
    "parse",
    "normalize_path",
    "normalize_paths",
    "normalize_report",
    "rebase_report",
    "working_root",
    "filter_changed",
    "diff",
    # Rendering
    "RenderOptions",
    "compress_ranges",
    "render",
]
