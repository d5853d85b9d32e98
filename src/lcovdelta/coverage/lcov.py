"""LCOV format parser.

LCOV is a plain text format with one directive per line:
- TN:<test name>
- SF:<source file path>
- FN:<line>[,<end line>],<name>
- FNDA:<hit count>,<name>
- DA:<line>,<hit count>[,<checksum>]
- BRDA:<line>,<block>,<branch>,<taken>   (taken is '-' when never executed)
- LF/LH, BRF/BRH, FNF/FNH: summary counts (ignored, recomputed from records)
- end_of_record

Parsing is tolerant. A directive whose fields don't parse is skipped, a
record with an empty path is skipped up to its end_of_record, and a record
missing its terminator at end of input is still emitted. Only input with
no recognizable directive at all is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from lcovdelta.coverage.models import BranchKey, CoverageReport, FileRecord
from lcovdelta.core.errors import MalformedRecordError, MalformedReportError

log = structlog.get_logger(__name__)

END_OF_RECORD = "end_of_record"

# Directives that carry no information we don't recompute ourselves
_IGNORED_TAGS = frozenset({"TN", "VER", "LF", "LH", "BRF", "BRH", "FNF", "FNH", "FNL", "FNA"})


@dataclass(slots=True)
class _RecordBuilder:
    """Mutable state for the record currently being parsed."""

    path: str
    lines: dict[int, int] = field(default_factory=dict)
    functions: dict[str, int] = field(default_factory=dict)
    branches: dict[BranchKey, int] = field(default_factory=dict)

    def declare_function(self, name: str) -> None:
        self.functions.setdefault(name, 0)

    def add_function_hits(self, name: str, hits: int) -> None:
        self.functions[name] = self.functions.get(name, 0) + hits

    def add_line_hits(self, line: int, hits: int) -> None:
        self.lines[line] = self.lines.get(line, 0) + hits

    def add_branch_taken(self, key: BranchKey, taken: int) -> None:
        self.branches[key] = self.branches.get(key, 0) + taken

    def build(self) -> FileRecord:
        return FileRecord.create(self.path, self.lines, self.functions, self.branches)


def _int_field(value: str, what: str, lineno: int, line: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise MalformedRecordError.bad_directive(lineno, line, f"{what} is not a number") from None
    if number < 0:
        raise MalformedRecordError.bad_directive(lineno, line, f"{what} is negative")
    return number


def _count_field(value: str, what: str, lineno: int, line: str) -> int:
    # gcov/llvm-cov use '-' for "not executed"
    if value == "-":
        return 0
    return _int_field(value, what, lineno, line)


def _split(rest: str, minimum: int, lineno: int, line: str) -> list[str]:
    parts = rest.split(",")
    if len(parts) < minimum:
        raise MalformedRecordError.bad_directive(
            lineno, line, f"expected {minimum} fields, got {len(parts)}"
        )
    return parts


def _apply(builder: _RecordBuilder, tag: str, rest: str, lineno: int, line: str) -> None:
    """Apply one in-record directive. Raises MalformedRecordError on bad fields."""
    if tag == "DA":
        parts = _split(rest, 2, lineno, line)
        builder.add_line_hits(
            _int_field(parts[0], "line", lineno, line),
            _count_field(parts[1], "hit count", lineno, line),
        )

    elif tag == "FN":
        parts = _split(rest, 2, lineno, line)
        _int_field(parts[0], "line", lineno, line)
        # FN:<start>,<end>,<name> in lcov 2.x
        name_parts = parts[2:] if len(parts) >= 3 and parts[1].isdigit() else parts[1:]
        name = ",".join(name_parts)
        if not name:
            raise MalformedRecordError.bad_directive(lineno, line, "empty function name")
        builder.declare_function(name)

    elif tag == "FNDA":
        parts = rest.split(",", 1)
        if len(parts) < 2 or not parts[1]:
            raise MalformedRecordError.bad_directive(lineno, line, "missing function name")
        builder.add_function_hits(parts[1], _count_field(parts[0], "hit count", lineno, line))

    elif tag == "BRDA":
        parts = _split(rest, 4, lineno, line)
        key = (
            _int_field(parts[0], "line", lineno, line),
            _int_field(parts[1], "block", lineno, line),
            _int_field(parts[2], "branch", lineno, line),
        )
        builder.add_branch_taken(key, _count_field(parts[3], "taken count", lineno, line))


def parse(text: str) -> CoverageReport:
    """Parse LCOV text into a CoverageReport.

    Records appear in first-seen order. Repeated SF paths produce separate
    records; see ``CoverageReport.by_path`` for lookup semantics.

    Raises:
        MalformedReportError: If the text has content but no LCOV directives.
    """
    records: list[FileRecord] = []
    builder: _RecordBuilder | None = None
    content_lines = 0
    recognized = 0
    skipped = 0

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        content_lines += 1

        if line == END_OF_RECORD:
            recognized += 1
            if builder is not None:
                records.append(builder.build())
            builder = None
            continue

        tag, sep, rest = line.partition(":")
        if not sep:
            continue

        if tag == "SF":
            recognized += 1
            if builder is not None:
                # Previous record never terminated
                records.append(builder.build())
            path = rest.strip()
            if path:
                builder = _RecordBuilder(path=path)
            else:
                builder = None
                skipped += 1
                log.debug("lcov.record_skipped", lineno=lineno, reason="empty source file path")
            continue

        if tag in ("DA", "FN", "FNDA", "BRDA"):
            recognized += 1
        elif tag in _IGNORED_TAGS:
            recognized += 1
            continue
        else:
            continue

        if builder is None:
            # Directive outside any open record
            continue

        try:
            _apply(builder, tag, rest.strip(), lineno, line)
        except MalformedRecordError as e:
            skipped += 1
            log.debug("lcov.directive_skipped", path=builder.path, **e.details)

    if builder is not None:
        records.append(builder.build())

    if content_lines and not recognized:
        raise MalformedReportError.no_directives(content_lines)

    if skipped:
        log.warning("lcov.malformed_input", skipped=skipped, records=len(records))
    return CoverageReport(records=tuple(records))
