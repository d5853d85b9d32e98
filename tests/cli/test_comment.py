"""Tests for the comment command against a mocked GitHub API."""

from __future__ import annotations

import functools
import json
from pathlib import Path
from typing import Any

import httpx
import pytest
from click.testing import CliRunner

from lcovdelta.cli.main import cli
from lcovdelta.github import GitHubClient


class _Api:
    """Canned responses keyed by (method, path); records what was sent."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"message": "Not Found"})
        status, payload = self.routes[key]
        return httpx.Response(status, json=payload)

    def posted_bodies(self) -> list[str]:
        return [json.loads(r.content)["body"] for r in self.requests if r.method == "POST"]


@pytest.fixture
def api(monkeypatch: pytest.MonkeyPatch) -> _Api:
    fake = _Api()
    monkeypatch.setattr(
        "lcovdelta.cli.comment.GitHubClient",
        functools.partial(GitHubClient, transport=httpx.MockTransport(fake.handler)),
    )
    return fake


@pytest.fixture
def pr_env(workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    event = workspace / "event.json"
    event.write_text(
        json.dumps(
            {
                "pull_request": {
                    "number": 5,
                    "head": {"ref": "feature", "sha": "f" * 40},
                    "base": {"ref": "main", "sha": "0" * 40},
                }
            }
        )
    )
    monkeypatch.setenv("GITHUB_EVENT_NAME", "pull_request")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event))
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/repo")
    monkeypatch.setenv("GITHUB_WORKFLOW", "CI")
    monkeypatch.setenv("GITHUB_WORKSPACE", str(workspace))
    monkeypatch.setenv("GITHUB_TOKEN", "token")


class TestCommentOnPullRequest:
    @pytest.mark.usefixtures("pr_env")
    def test_posts_issue_comment(self, runner: CliRunner, workspace: Path, api: _Api) -> None:
        api.routes[("POST", "/repos/octo/repo/issues/5/comments")] = (
            201,
            {"html_url": "https://github.com/octo/repo/pull/5#issuecomment-1"},
        )

        result = runner.invoke(
            cli,
            [
                "comment",
                "-w",
                str(workspace),
                "--lcov-base",
                str(workspace / "coverage/base.info"),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Coverage comment posted: https://github.com/octo/repo/pull/5#issuecomment-1" in (
            result.output
        )
        [body] = api.posted_bodies()
        assert body.startswith("<!-- lcovdelta: CI -->\n")
        assert "Coverage after merging **feature** into **main** will be **60.00%**" in body

    @pytest.mark.usefixtures("pr_env")
    def test_filters_to_pull_request_files(
        self, runner: CliRunner, workspace: Path, api: _Api
    ) -> None:
        api.routes[("GET", "/repos/octo/repo/pulls/5/files")] = (
            200,
            [{"filename": "src/b.js", "status": "modified"}],
        )
        api.routes[("POST", "/repos/octo/repo/issues/5/comments")] = (201, {"html_url": "u"})

        result = runner.invoke(
            cli, ["comment", "-w", str(workspace), "--filter-changed-files"]
        )

        assert result.exit_code == 0, result.output
        [body] = api.posted_bodies()
        assert "Coverage Report for Changed Files" in body
        assert "src/b.js" in body
        assert "src/a.js" not in body

    @pytest.mark.usefixtures("pr_env")
    def test_deletes_old_comments_first(
        self, runner: CliRunner, workspace: Path, api: _Api
    ) -> None:
        api.routes[("GET", "/repos/octo/repo/issues/5/comments")] = (
            200,
            [
                {
                    "id": 11,
                    "user": {"login": "github-actions[bot]"},
                    "body": "<!-- lcovdelta: CI -->",
                }
            ],
        )
        api.routes[("DELETE", "/repos/octo/repo/issues/comments/11")] = (204, None)
        api.routes[("POST", "/repos/octo/repo/issues/5/comments")] = (201, {"html_url": "u"})

        result = runner.invoke(
            cli, ["comment", "-w", str(workspace), "--delete-old-comments"]
        )

        assert result.exit_code == 0, result.output
        assert [r.method for r in api.requests] == ["GET", "DELETE", "POST"]

    @pytest.mark.usefixtures("pr_env")
    def test_missing_report_posts_nothing(
        self, runner: CliRunner, tmp_path: Path, api: _Api
    ) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()

        result = runner.invoke(cli, ["comment", "-w", str(empty)])

        assert result.exit_code == 0
        assert "No coverage report found at" in result.output
        assert api.requests == []

    @pytest.mark.usefixtures("pr_env")
    def test_api_failure_is_reported(
        self, runner: CliRunner, workspace: Path, api: _Api
    ) -> None:
        result = runner.invoke(cli, ["comment", "-w", str(workspace)])

        assert result.exit_code != 0
        assert "GITHUB_API_ERROR" in result.output


class TestCommentPreconditions:
    def test_missing_context(self, runner: CliRunner, workspace: Path, api: _Api) -> None:
        result = runner.invoke(cli, ["comment", "-w", str(workspace), "--github-token", "t"])

        assert result.exit_code != 0
        assert "GITHUB_EVENT_NAME" in result.output

    def test_missing_token(
        self, runner: CliRunner, workspace: Path, api: _Api, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GITHUB_EVENT_NAME", "push")
        monkeypatch.setenv("GITHUB_REPOSITORY", "octo/repo")

        result = runner.invoke(cli, ["comment", "-w", str(workspace)])

        assert result.exit_code != 0
        assert "GITHUB_MISSING_TOKEN" in result.output
