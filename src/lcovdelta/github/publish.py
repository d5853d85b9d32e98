"""Publish a rendered summary to GitHub.

Pull request events get an issue comment, push events a commit comment.
Every comment starts with a hidden marker naming the workflow, which is how
earlier comments are found when old ones should be deleted.
"""

from __future__ import annotations

from typing import Any

import structlog

from lcovdelta.core.errors import GitHubError
from lcovdelta.github.client import GitHubClient
from lcovdelta.github.context import GitHubContext

log = structlog.get_logger(__name__)

BOT_LOGIN = "github-actions[bot]"


def comment_marker(workflow: str) -> str:
    return f"<!-- lcovdelta: {workflow} -->" if workflow else "<!-- lcovdelta -->"


def with_marker(body: str, workflow: str) -> str:
    return f"{comment_marker(workflow)}\n{body}"


def get_changed_files(client: GitHubClient, context: GitHubContext) -> set[str]:
    """Files changed by the pull request, or by the pushed commit range."""
    if context.is_pull_request and context.pr_number is not None:
        files = client.list_pull_request_files(context.repository, context.pr_number)
    elif context.is_push and context.base_commit and context.commit:
        files = client.compare_commits(context.repository, context.base_commit, context.commit)
    else:
        raise GitHubError.unsupported_event(context.event_name)
    log.info("github.changed_files", count=len(files))
    return set(files)


def delete_old_comments(client: GitHubClient, context: GitHubContext) -> int:
    """Delete earlier bot comments carrying this workflow's marker. Returns the count.

    Only pull requests have an issue thread to prune; other events are a no-op.
    """
    if not context.is_pull_request or context.pr_number is None:
        return 0

    marker = comment_marker(context.workflow)
    deleted = 0
    for comment in client.list_issue_comments(context.repository, context.pr_number):
        author = (comment.get("user") or {}).get("login")
        if author == BOT_LOGIN and marker in (comment.get("body") or ""):
            client.delete_issue_comment(context.repository, comment["id"])
            deleted += 1
    log.info("github.old_comments_deleted", count=deleted)
    return deleted


def publish(client: GitHubClient, context: GitHubContext, body: str) -> dict[str, Any]:
    """Post the summary where the event calls for it.

    Raises:
        GitHubError: For events other than pull_request or push, or API failures.
    """
    text = with_marker(body, context.workflow)
    if context.is_pull_request and context.pr_number is not None:
        result = client.create_issue_comment(context.repository, context.pr_number, text)
    elif context.is_push and context.commit:
        result = client.create_commit_comment(context.repository, context.commit, text)
    else:
        raise GitHubError.unsupported_event(context.event_name)
    log.info("github.comment_posted", url=result.get("html_url"))
    return result
