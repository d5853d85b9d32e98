"""GitHub collaborators: event context, REST client, and comment publishing."""

from lcovdelta.github.client import GitHubClient
from lcovdelta.github.context import GitHubContext
from lcovdelta.github.publish import (
    BOT_LOGIN,
    comment_marker,
    delete_old_comments,
    get_changed_files,
    publish,
    with_marker,
)

__all__ = [
    "BOT_LOGIN",
    "GitHubClient",
    "GitHubContext",
    "comment_marker",
    "delete_old_comments",
    "get_changed_files",
    "publish",
    "with_marker",
]
