"""Changed-file lister for a local repository via pygit2.

Used by ``lcovdelta report --changed-since REF`` outside of GitHub Actions.
"""

from __future__ import annotations

from pathlib import Path

import pygit2
import structlog

log = structlog.get_logger(__name__)


class GitError(Exception):
    """Base error for git operations."""

    pass


class NotARepositoryError(GitError):
    """Path is not a git repository."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git repository: {path}")
        self.path = path


class RefNotFoundError(GitError):
    """Reference (branch, tag, commit) not found."""

    def __init__(self, ref: str) -> None:
        super().__init__(f"Reference not found: {ref}")
        self.ref = ref


def _open(repo_path: Path) -> pygit2.Repository:
    discovered = pygit2.discover_repository(str(repo_path))
    if discovered is None:
        raise NotARepositoryError(str(repo_path))
    return pygit2.Repository(discovered)


def _resolve_commit(repo: pygit2.Repository, ref: str) -> pygit2.Commit:
    try:
        obj, _ = repo.resolve_refish(ref)
    except (pygit2.GitError, KeyError) as e:
        raise RefNotFoundError(ref) from e
    if isinstance(obj, pygit2.Tag):
        obj = obj.peel(pygit2.Commit)
    if not isinstance(obj, pygit2.Commit):
        raise RefNotFoundError(f"{ref} is not a commit")
    return obj


def changed_files(repo_path: Path, base: str, head: str = "HEAD") -> set[str]:
    """Repository-relative paths added or modified between ``base`` and ``head``.

    The comparison starts at the merge base, like a pull request diff, so
    commits that only landed on ``base`` don't count. Deleted files are
    excluded since they can't carry coverage.
    """
    repo = _open(repo_path)
    head_commit = _resolve_commit(repo, head)
    base_commit = _resolve_commit(repo, base)

    merge_base = repo.merge_base(base_commit.id, head_commit.id)
    start = repo.get(merge_base) if merge_base is not None else base_commit

    result = {
        delta.new_file.path
        for delta in repo.diff(start, head_commit).deltas
        if delta.status != pygit2.GIT_DELTA_DELETED
    }
    log.debug("git.changed_files", base=base, head=head, count=len(result))
    return result


def repository_root(repo_path: Path) -> Path:
    """Top of the working tree containing ``repo_path``."""
    repo = _open(repo_path)
    if repo.workdir is None:
        raise NotARepositoryError(f"{repo_path} (bare repository)")
    return Path(repo.workdir).resolve()
