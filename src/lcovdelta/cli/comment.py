"""lcovdelta comment command - post the coverage summary to GitHub."""

from __future__ import annotations

from typing import Any

import click

from lcovdelta.cli.options import build_config, report_options
from lcovdelta.core.errors import LcovDeltaError, MissingReportError
from lcovdelta.github import (
    GitHubClient,
    GitHubContext,
    delete_old_comments,
    get_changed_files,
    publish,
)
from lcovdelta.ops import summarize


@click.command()
@report_options
@click.option(
    "--github-token",
    envvar="GITHUB_TOKEN",
    help="Token used to read changes and post comments (env: GITHUB_TOKEN)",
)
@click.option(
    "--delete-old-comments",
    is_flag=True,
    help="Delete earlier lcovdelta comments on the pull request first",
)
@click.pass_context
def comment_command(ctx: click.Context, **options: Any) -> None:
    """Post the coverage summary as a pull request or commit comment.

    Reads the event from the GitHub Actions environment (GITHUB_EVENT_NAME,
    GITHUB_EVENT_PATH, GITHUB_REPOSITORY, GITHUB_WORKFLOW).
    """
    config = build_config(ctx, options)

    try:
        context = GitHubContext.from_env()
        with GitHubClient(
            config.github.token or "",
            api_url=config.github.api_url,
            timeout=config.github.timeout_sec,
        ) as client:
            changed = (
                get_changed_files(client, context) if config.report.filter_changed_files else None
            )
            try:
                summary = summarize(
                    config, changed_files=changed, head=context.head, base=context.base
                )
            except MissingReportError as e:
                click.echo(f"{e.message}, exiting...")
                return

            if config.github.delete_old_comments:
                delete_old_comments(client, context)
            result = publish(client, context, summary.body)
    except LcovDeltaError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Coverage comment posted: {result.get('html_url', '')}")
