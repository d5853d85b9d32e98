"""Render a DiffResult as a Markdown summary.

Layout, one self-contained line per item so any prefix of the output is
still valid Markdown:

    ## <title>
    Coverage after merging **head** into **base** will be **80.00%** ▴ +2.50%
    - **Total:** Stmts 80.00% ▴ +2.50% · Branches 50.00% · Funcs - · Lines 80.00% ▴ +2.50%
    - **Files:** 3 files (1 new, 1 removed)
    ### Coverage Report
    | File | Stmts | Branches | Funcs | Lines | Uncovered Lines |
    | :--- | ---: | ---: | ---: | ---: | :--- |
    | src/a.js | 80.00% ▴ +2.50% | - | 100.00% | 80.00% ▴ +2.50% | 12-15, 20 |

Percentages without data render as '-'. The direction marker only appears
when both sides have data and differ at two-decimal precision.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from lcovdelta.config.models import RenderConfig
from lcovdelta.core.formatting import format_percentage, pluralize
from lcovdelta.coverage.models import DiffEntry, DiffResult, Metric, Stats

UP = "▴"
DOWN = "▾"

_COLUMN_LABELS = {
    Metric.STATEMENTS: "Stmts",
    Metric.BRANCHES: "Branches",
    Metric.FUNCTIONS: "Funcs",
    Metric.LINES: "Lines",
}


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Display options. Built once per run and passed explicitly."""

    title: str | None = None
    omit_statement_percentage: bool = False
    omit_branch_percentage: bool = False
    omit_function_percentage: bool = False
    omit_line_percentage: bool = False
    omit_uncovered_lines: bool = False
    head: str | None = None  # branch/ref being reported on
    base: str | None = None  # branch/ref it will merge into
    changed_files_only: bool = False

    @classmethod
    def from_config(
        cls,
        config: RenderConfig,
        *,
        head: str | None = None,
        base: str | None = None,
        changed_files_only: bool = False,
    ) -> RenderOptions:
        return cls(
            title=config.title,
            omit_statement_percentage=config.omit_statement_percentage,
            omit_branch_percentage=config.omit_branch_percentage,
            omit_function_percentage=config.omit_function_percentage,
            omit_line_percentage=config.omit_line_percentage,
            omit_uncovered_lines=config.omit_uncovered_lines,
            head=head,
            base=base,
            changed_files_only=changed_files_only,
        )

    @property
    def metrics(self) -> list[Metric]:
        """Metrics to show, in column order."""
        omitted = {
            Metric.STATEMENTS: self.omit_statement_percentage,
            Metric.BRANCHES: self.omit_branch_percentage,
            Metric.FUNCTIONS: self.omit_function_percentage,
            Metric.LINES: self.omit_line_percentage,
        }
        return [m for m in Metric if not omitted[m]]


def compress_ranges(lines: Sequence[int]) -> str:
    """Collapse sorted line numbers into ranges.

    Examples:
        [12, 13, 14, 15, 20] -> "12-15, 20"
        [] -> ""
    """
    if not lines:
        return ""

    parts: list[str] = []
    start = prev = lines[0]
    for line in lines[1:]:
        if line == prev + 1:
            prev = line
            continue
        parts.append(str(start) if start == prev else f"{start}-{prev}")
        start = prev = line
    parts.append(str(start) if start == prev else f"{start}-{prev}")

    return ", ".join(parts)


def format_delta(delta: float | None) -> str:
    """Direction marker plus signed change, or '' when there is none to show."""
    if delta is None:
        return ""
    rounded = round(delta, 2)
    if rounded == 0:
        return ""
    marker = UP if rounded > 0 else DOWN
    return f"{marker} {rounded:+.2f}%"


def _cell(stats: Stats, metric: Metric, delta: float | None) -> str:
    text = format_percentage(stats.percentage(metric))
    indicator = format_delta(delta)
    return f"{text} {indicator}" if indicator else text


def _escape(text: str) -> str:
    return text.replace("|", "\\|")


def _headline(result: DiffResult, options: RenderOptions) -> str:
    total = format_percentage(result.current_total.percentage(Metric.LINES))
    delta = format_delta(result.delta(Metric.LINES))
    suffix = f" {delta}" if delta else ""
    if options.head and options.base:
        return (
            f"Coverage after merging **{_escape(options.head)}** into "
            f"**{_escape(options.base)}** will be **{total}**{suffix}"
        )
    return f"Coverage for this commit: **{total}**{suffix}"


def _totals_line(result: DiffResult, options: RenderOptions) -> str | None:
    metrics = options.metrics
    if not metrics:
        return None
    parts = [
        f"{_COLUMN_LABELS[m]} {_cell(result.current_total, m, result.delta(m))}" for m in metrics
    ]
    return "- **Total:** " + " · ".join(parts)


def _files_line(result: DiffResult) -> str:
    line = f"- **Files:** {pluralize(len(result.entries), 'file')}"
    if result.has_baseline:
        line += f" ({result.added} new, {result.removed} removed)"
    return line


def _row(entry: DiffEntry, options: RenderOptions) -> str:
    name = _escape(entry.path)
    if entry.is_new:
        name += " _(new)_"
    cells = [name]
    cells.extend(_cell(entry.current, m, entry.delta(m)) for m in options.metrics)
    if not options.omit_uncovered_lines:
        cells.append(compress_ranges(entry.uncovered_lines))
    return "| " + " | ".join(cells) + " |"


def _table(result: DiffResult, options: RenderOptions) -> list[str]:
    if not result.entries:
        return ["_No files to report._"]

    header = ["File", *(_COLUMN_LABELS[m] for m in options.metrics)]
    align = [":---", *("---:" for _ in options.metrics)]
    if not options.omit_uncovered_lines:
        header.append("Uncovered Lines")
        align.append(":---")

    lines = ["| " + " | ".join(header) + " |", "| " + " | ".join(align) + " |"]
    lines.extend(_row(entry, options) for entry in result.entries)
    return lines


def render(result: DiffResult, options: RenderOptions | None = None) -> str:
    """Render the summary. Output is deterministic for identical inputs."""
    options = options or RenderOptions()

    lines: list[str] = []
    if options.title:
        lines.append(f"## {options.title}")
        lines.append("")

    lines.append(_headline(result, options))
    lines.append("")

    totals = _totals_line(result, options)
    if totals:
        lines.append(totals)
    lines.append(_files_line(result))
    lines.append("")

    section = "Coverage Report"
    if options.changed_files_only:
        section += " for Changed Files"
    lines.append(f"### {section}")
    lines.append("")
    lines.extend(_table(result, options))

    return "\n".join(lines) + "\n"
