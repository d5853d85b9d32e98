"""Path normalization so paths from different reports and tools compare equal.

Normalized form: '/' separators, no repeated separators, no leading './' or
'/', and the absolute workspace prefix stripped when present. Normalizing a
normalized path is a no-op.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from lcovdelta.coverage.models import CoverageReport

_SEPARATOR_RUN = re.compile(r"/{2,}")
_DRIVE = re.compile(r"^[A-Za-z]:/")


def _canonical_separators(path: str) -> str:
    return _SEPARATOR_RUN.sub("/", path.replace("\\", "/"))


def _is_absolute(path: str) -> bool:
    return path.startswith("/") or bool(_DRIVE.match(path))


def _has_prefix(path: str, prefix: str) -> bool:
    # Drive letters compare case-insensitively, the rest of the path does not
    if _DRIVE.match(prefix):
        return path[:1].lower() == prefix[:1].lower() and path[1:].startswith(prefix[1:])
    return path.startswith(prefix)


def normalize_prefix(prefix: str | None) -> str:
    """Canonical form of a strip prefix: '/' separators with a trailing '/'.

    Relative prefixes are discarded (returned as ''). Stripping a relative
    prefix would not be idempotent, since its result could match it again.
    """
    if not prefix:
        return ""
    canonical = _canonical_separators(prefix.strip())
    if not _is_absolute(canonical):
        return ""
    return canonical if canonical.endswith("/") else canonical + "/"


def normalize_path(path: str, prefix: str | None = None) -> str:
    """Normalize a report path.

    Examples:
        normalize_path("/home/ci/repo/src/a.js", "/home/ci/repo") -> "src/a.js"
        normalize_path("src\\\\lib\\\\b.js") -> "src/lib/b.js"
        normalize_path("./src/a.js") -> "src/a.js"
    """
    normalized = _canonical_separators(path)

    strip = normalize_prefix(prefix)
    if strip and _has_prefix(normalized, strip):
        normalized = normalized[len(strip) :]

    while normalized.startswith(("./", "/")):
        normalized = normalized[2:] if normalized.startswith("./") else normalized[1:]

    return normalized


def normalize_paths(paths: Iterable[str], prefix: str | None = None) -> set[str]:
    """Normalize a set of paths (e.g. the changed-file list) the same way."""
    return {normalize_path(p, prefix) for p in paths}


def normalize_report(report: CoverageReport, prefix: str | None = None) -> CoverageReport:
    """Return a report whose record paths are normalized. Order is preserved."""
    return CoverageReport(
        records=tuple(record.with_path(normalize_path(record.path, prefix)) for record in report)
    )


def working_root(working_directory: str, prefix: str | None) -> str:
    """Location of an absolute working directory below ``prefix``, e.g. 'packages/app'.

    Returns '' when the working directory is the prefix itself or lies
    outside it.
    """
    strip = normalize_prefix(prefix)
    directory = normalize_prefix(working_directory)
    if not strip or not directory or not _has_prefix(directory, strip):
        return ""
    return directory[len(strip) :].rstrip("/")


def rebase_report(report: CoverageReport, root: str) -> CoverageReport:
    """Prefix relative record paths with ``root``; absolute paths are left alone.

    Coverage tools write paths relative to the directory they ran in, while
    changed-file lists are relative to the repository. Apply this to raw
    parsed paths, before ``normalize_report``.
    """
    if not root:
        return report
    records = []
    for record in report:
        if _is_absolute(_canonical_separators(record.path)):
            records.append(record)
        else:
            records.append(record.with_path(f"{root}/{normalize_path(record.path)}"))
    return CoverageReport(records=tuple(records))
