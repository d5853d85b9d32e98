"""Restrict a report to the files touched by a change set."""

from __future__ import annotations

from collections.abc import Collection

import structlog

from lcovdelta.config.models import EmptyChangedPolicy
from lcovdelta.coverage.models import CoverageReport

log = structlog.get_logger(__name__)


def filter_changed(
    report: CoverageReport,
    changed: Collection[str],
    *,
    empty_policy: EmptyChangedPolicy,
) -> CoverageReport:
    """Keep only records whose path is in ``changed``, preserving order.

    ``changed`` must already be normalized like the report paths. An empty
    set is ambiguous, so the caller has to say what it means:
    ``PASS_THROUGH`` returns the report unchanged and ``FILTER_TO_EMPTY``
    returns an empty report.
    """
    if not changed:
        log.debug("filter.empty_changed_set", policy=empty_policy.value)
        if empty_policy is EmptyChangedPolicy.PASS_THROUGH:
            return report
        return CoverageReport()

    kept = tuple(record for record in report if record.path in changed)
    log.debug("filter.applied", kept=len(kept), total=len(report))
    return CoverageReport(records=kept)
