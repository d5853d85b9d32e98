"""Compare a current coverage report against an optional baseline.

The result is centered on the current state: every path in the current
report gets an entry, while paths only in the baseline (removed files) are
counted but produce no entry. Baseline totals are limited to paths that
still exist so the totals compare like with like.
"""

from __future__ import annotations

import structlog

from lcovdelta.coverage.models import CoverageReport, DiffEntry, DiffResult, Stats

log = structlog.get_logger(__name__)


def diff(current: CoverageReport, baseline: CoverageReport | None = None) -> DiffResult:
    """Diff ``current`` against ``baseline``.

    Without a baseline every entry's baseline is None, so deltas are absent
    rather than computed against an implied 0%.
    """
    current_files = current.by_path()
    baseline_files = baseline.by_path() if baseline is not None else None

    entries: list[DiffEntry] = []
    for path in sorted(current_files):
        record = current_files[path]
        base_record = baseline_files.get(path) if baseline_files is not None else None
        entries.append(
            DiffEntry(
                path=path,
                current=record.stats,
                baseline=base_record.stats if base_record is not None else None,
                uncovered_lines=record.uncovered_lines,
                is_new=baseline_files is not None and base_record is None,
            )
        )

    current_total = Stats.total(e.current for e in entries)

    if baseline_files is None:
        log.debug("diff.no_baseline", files=len(entries))
        return DiffResult(entries=tuple(entries), current_total=current_total, baseline_total=None)

    baseline_total = Stats.total(e.baseline for e in entries if e.baseline is not None)
    added = sum(1 for e in entries if e.is_new)
    removed = sum(1 for path in baseline_files if path not in current_files)

    log.debug("diff.computed", files=len(entries), added=added, removed=removed)
    return DiffResult(
        entries=tuple(entries),
        current_total=current_total,
        baseline_total=baseline_total,
        added=added,
        removed=removed,
    )
