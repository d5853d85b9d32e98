"""Coverage data model.

File-centric model: a report is an ordered sequence of per-file records,
and everything the differ and renderer need is derived from those records.

Percentages are tri-state. ``Coverage.percentage`` is ``None`` when nothing
was instrumented for a metric ("no data"), which is distinct from 0% and is
never treated as 100%.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

BranchKey = tuple[int, int, int]  # (line, block id, branch id)


class Metric(str, Enum):
    """Metrics shown in the summary.

    LCOV has no separate statement records, so statements are derived from
    line data, the same way istanbul's lcov reporter emits them.
    """

    STATEMENTS = "statements"
    BRANCHES = "branches"
    FUNCTIONS = "functions"
    LINES = "lines"


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Coverage for a single source file. Immutable once parsed.

    Maps are read-only views; build records through the parser or
    ``FileRecord.create``.
    """

    path: str
    lines: Mapping[int, int]  # line number -> hit count
    functions: Mapping[str, int]  # function name -> hit count
    branches: Mapping[BranchKey, int]  # (line, block, branch) -> taken count

    @classmethod
    def create(
        cls,
        path: str,
        lines: Mapping[int, int] | None = None,
        functions: Mapping[str, int] | None = None,
        branches: Mapping[BranchKey, int] | None = None,
    ) -> FileRecord:
        return cls(
            path=path,
            lines=MappingProxyType(dict(lines or {})),
            functions=MappingProxyType(dict(functions or {})),
            branches=MappingProxyType(dict(branches or {})),
        )

    def with_path(self, path: str) -> FileRecord:
        return FileRecord(path, self.lines, self.functions, self.branches)

    @property
    def uncovered_lines(self) -> tuple[int, ...]:
        """Sorted line numbers with zero hits."""
        return tuple(sorted(line for line, hits in self.lines.items() if hits == 0))

    @property
    def stats(self) -> Stats:
        return Stats.of(self)


@dataclass(frozen=True, slots=True)
class CoverageReport:
    """Ordered sequence of file records, in first-seen order.

    Parsing keeps duplicate paths as separate records. Lookups by path use
    last-seen overwrite.
    """

    records: tuple[FileRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self.records)

    @property
    def paths(self) -> list[str]:
        """Distinct paths in first-seen order."""
        return list(dict.fromkeys(r.path for r in self.records))

    def by_path(self) -> dict[str, FileRecord]:
        """Path -> record lookup. Later records replace earlier ones."""
        return {r.path: r for r in self.records}


@dataclass(frozen=True, slots=True)
class Coverage:
    """Found/hit counts for one metric."""

    found: int = 0
    hit: int = 0

    @property
    def percentage(self) -> float | None:
        """hit/found * 100, or None when nothing was found."""
        if self.found == 0:
            return None
        return self.hit / self.found * 100.0

    def __add__(self, other: Coverage) -> Coverage:
        return Coverage(self.found + other.found, self.hit + other.hit)

    @classmethod
    def of_counts(cls, counts: Iterable[int]) -> Coverage:
        found = hit = 0
        for count in counts:
            found += 1
            if count > 0:
                hit += 1
        return cls(found, hit)


@dataclass(frozen=True, slots=True)
class Stats:
    """Derived found/hit counts for lines, branches and functions."""

    lines: Coverage = Coverage()
    branches: Coverage = Coverage()
    functions: Coverage = Coverage()

    @classmethod
    def of(cls, record: FileRecord) -> Stats:
        return cls(
            lines=Coverage.of_counts(record.lines.values()),
            branches=Coverage.of_counts(record.branches.values()),
            functions=Coverage.of_counts(record.functions.values()),
        )

    @classmethod
    def total(cls, stats: Iterable[Stats]) -> Stats:
        result = cls()
        for s in stats:
            result = result + s
        return result

    def __add__(self, other: Stats) -> Stats:
        return Stats(
            lines=self.lines + other.lines,
            branches=self.branches + other.branches,
            functions=self.functions + other.functions,
        )

    def coverage(self, metric: Metric) -> Coverage:
        if metric is Metric.BRANCHES:
            return self.branches
        if metric is Metric.FUNCTIONS:
            return self.functions
        return self.lines

    def percentage(self, metric: Metric) -> float | None:
        return self.coverage(metric).percentage


def percentage_delta(current: float | None, baseline: float | None) -> float | None:
    """current - baseline, or None if either side has no data."""
    if current is None or baseline is None:
        return None
    return current - baseline


@dataclass(frozen=True, slots=True)
class DiffEntry:
    """One current file paired with its baseline counterpart, if any."""

    path: str
    current: Stats
    baseline: Stats | None
    uncovered_lines: tuple[int, ...]
    is_new: bool = False  # baseline given, but path not in it

    def delta(self, metric: Metric) -> float | None:
        """Percentage-point change for a metric; None without a baseline."""
        if self.baseline is None:
            return None
        return percentage_delta(self.current.percentage(metric), self.baseline.percentage(metric))


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Diff of a current report against an optional baseline.

    ``baseline_total`` only covers paths that also exist in the current
    report. ``added``/``removed`` count paths relative to the baseline and
    are both 0 when no baseline was given.
    """

    entries: tuple[DiffEntry, ...]
    current_total: Stats
    baseline_total: Stats | None
    added: int = 0
    removed: int = 0

    @property
    def has_baseline(self) -> bool:
        return self.baseline_total is not None

    def delta(self, metric: Metric) -> float | None:
        if self.baseline_total is None:
            return None
        return percentage_delta(
            self.current_total.percentage(metric), self.baseline_total.percentage(metric)
        )
