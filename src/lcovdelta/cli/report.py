"""lcovdelta report command - print the coverage summary."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
import structlog

from lcovdelta.cli.options import build_config, report_options
from lcovdelta.core.errors import LcovDeltaError, MissingReportError
from lcovdelta.git import GitError, changed_files, repository_root
from lcovdelta.ops import summarize

log = structlog.get_logger(__name__)


@click.command()
@report_options
@click.option(
    "--changed-file",
    "changed",
    multiple=True,
    help="Path changed in this change set (repeatable); implies --filter-changed-files",
)
@click.option(
    "--changed-since",
    metavar="REF",
    help="Use files changed between REF and HEAD; implies --filter-changed-files",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the summary to a file instead of stdout",
)
@click.pass_context
def report_command(
    ctx: click.Context,
    changed: tuple[str, ...],
    changed_since: str | None,
    output: Path | None,
    **options: Any,
) -> None:
    """Print a Markdown coverage summary, compared to a baseline if given."""
    if changed or changed_since:
        options["filter_changed_files"] = True
    config = build_config(ctx, options)

    changed_set: set[str] | None = None
    if config.report.filter_changed_files:
        changed_set = set(changed)
        if changed_since:
            # Absolute, so the path prefix strips them like report paths
            working_directory = Path(config.report.working_directory)
            try:
                root = repository_root(working_directory)
                changed_set |= {
                    str(root / path) for path in changed_files(working_directory, changed_since)
                }
            except GitError as e:
                raise click.ClickException(str(e)) from e
        elif not changed:
            log.warning("report.no_changed_files_source")
            changed_set = None

    try:
        summary = summarize(
            config,
            changed_files=changed_set,
            head="HEAD" if changed_since else None,
            base=changed_since,
        )
    except MissingReportError as e:
        click.echo(f"{e.message}, exiting...")
        return
    except LcovDeltaError as e:
        raise click.ClickException(str(e)) from e

    if output is not None:
        output.write_text(summary.body, encoding="utf-8")
        click.echo(f"Summary written to {output}")
    else:
        click.echo(summary.body, nl=False)
