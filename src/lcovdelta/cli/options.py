"""Options shared by the report and comment commands."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from lcovdelta.config import EmptyChangedPolicy, LcovDeltaConfig, load_config
from lcovdelta.core.errors import LcovDeltaError
from lcovdelta.core.logging import configure_logging

F = TypeVar("F", bound=Callable[..., Any])

_OMIT_FLAGS = (
    "omit_statement_percentage",
    "omit_branch_percentage",
    "omit_function_percentage",
    "omit_line_percentage",
    "omit_uncovered_lines",
)


def report_options(func: F) -> F:
    """Attach the report/render options to a command."""
    decorators = [
        click.option(
            "--config",
            "config_file",
            type=click.Path(dir_okay=False, path_type=Path),
            help="YAML config file (default: .lcovdelta.yaml in the working directory)",
        ),
        click.option(
            "--working-directory",
            "-w",
            type=click.Path(file_okay=False, path_type=Path),
            help="Directory the lcov file is relative to",
        ),
        click.option("--lcov-file", "-f", help="Current LCOV report (default: coverage/lcov.info)"),
        click.option("--lcov-base", "-b", help="Baseline LCOV report to compare against"),
        click.option("--prefix", help="Absolute path prefix to strip from report paths"),
        click.option("--title", "-t", help="Heading shown above the summary"),
        click.option(
            "--filter-changed-files",
            is_flag=True,
            help="Only report files changed in this change set",
        ),
        click.option(
            "--empty-changed",
            type=click.Choice([p.value for p in EmptyChangedPolicy]),
            help="With --filter-changed-files and no changed files: report all or nothing",
        ),
        click.option("--max-chars", type=int, help="Truncate the summary to this many characters"),
        *(
            click.option(f"--{flag.replace('_', '-')}", flag, is_flag=True, help=_omit_help(flag))
            for flag in _OMIT_FLAGS
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _omit_help(flag: str) -> str:
    what = flag.removeprefix("omit_").replace("_", " ")
    return f"Hide {what} in the summary"


def build_config(ctx: click.Context, overrides: dict[str, Any]) -> LcovDeltaConfig:
    """Load config with CLI values on top, then configure logging from it.

    Unset options (None / False flags) are left to env vars and YAML.

    Raises:
        click.ClickException: On invalid configuration.
    """
    working_directory: Path | None = overrides.get("working_directory")

    report: dict[str, Any] = {}
    if working_directory is not None:
        report["working_directory"] = str(working_directory)
    for key in ("lcov_file", "lcov_base", "prefix"):
        if overrides.get(key) is not None:
            report[key] = overrides[key]
    if overrides.get("filter_changed_files"):
        report["filter_changed_files"] = True
    if overrides.get("empty_changed") is not None:
        report["empty_changed_policy"] = overrides["empty_changed"]

    render: dict[str, Any] = {}
    if overrides.get("title") is not None:
        render["title"] = overrides["title"]
    if overrides.get("max_chars") is not None:
        render["max_chars"] = overrides["max_chars"]
    for flag in _OMIT_FLAGS:
        if overrides.get(flag):
            render[flag] = True

    github: dict[str, Any] = {}
    if overrides.get("github_token"):
        github["token"] = overrides["github_token"]
    if overrides.get("delete_old_comments"):
        github["delete_old_comments"] = True

    kwargs = {
        name: section
        for name, section in (("report", report), ("render", render), ("github", github))
        if section
    }

    try:
        config = load_config(
            working_directory, config_file=overrides.get("config_file"), **kwargs
        )
    except LcovDeltaError as e:
        raise click.ClickException(str(e)) from e

    if not (ctx.obj or {}).get("verbose"):
        configure_logging(config=config.logging)
    return config
