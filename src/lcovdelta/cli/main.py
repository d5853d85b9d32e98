"""lcovdelta CLI - lcovdelta command."""

import click

from lcovdelta.cli.comment import comment_command
from lcovdelta.cli.report import report_command
from lcovdelta.core.logging import configure_logging, set_run_id


@click.group()
@click.version_option(package_name="lcovdelta", prog_name="lcovdelta")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """lcovdelta - LCOV coverage summaries with baseline deltas."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")
    set_run_id()


cli.add_command(report_command, name="report")
cli.add_command(comment_command, name="comment")


if __name__ == "__main__":
    cli()
