"""Minimal GitHub REST client over httpx.

Only the endpoints the publisher needs: changed files for a pull request or
commit range, issue/commit comments, and comment deletion.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx
import structlog

from lcovdelta.config.models import DEFAULT_API_URL
from lcovdelta.core.errors import GitHubError

log = structlog.get_logger(__name__)

PER_PAGE = 100


class GitHubClient:
    """Thin wrapper around httpx.Client with GitHub auth and error mapping."""

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not token:
            raise GitHubError.missing_token()
        self._client = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "lcovdelta",
            },
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # =========================================================================
    # Transport
    # =========================================================================

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise GitHubError.api_error(method, url, 0, str(e)) from e
        log.debug("github.request", method=method, url=url, status=response.status_code)
        if response.is_error:
            raise GitHubError.api_error(method, url, response.status_code, response.text)
        return response

    def _paginate(self, url: str) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            batch = self._request("GET", url, params={"per_page": PER_PAGE, "page": page}).json()
            items.extend(batch)
            if len(batch) < PER_PAGE:
                return items
            page += 1

    # =========================================================================
    # Changed files
    # =========================================================================

    def list_pull_request_files(self, repository: str, number: int) -> list[str]:
        files = self._paginate(f"/repos/{repository}/pulls/{number}/files")
        return [f["filename"] for f in files if f.get("status") != "removed"]

    def compare_commits(self, repository: str, base: str, head: str) -> list[str]:
        data = self._request("GET", f"/repos/{repository}/compare/{base}...{head}").json()
        return [f["filename"] for f in data.get("files", []) if f.get("status") != "removed"]

    # =========================================================================
    # Comments
    # =========================================================================

    def create_issue_comment(self, repository: str, number: int, body: str) -> dict[str, Any]:
        response = self._request(
            "POST", f"/repos/{repository}/issues/{number}/comments", json={"body": body}
        )
        result: dict[str, Any] = response.json()
        return result

    def create_commit_comment(self, repository: str, sha: str, body: str) -> dict[str, Any]:
        response = self._request(
            "POST", f"/repos/{repository}/commits/{sha}/comments", json={"body": body}
        )
        result: dict[str, Any] = response.json()
        return result

    def list_issue_comments(self, repository: str, number: int) -> list[dict[str, Any]]:
        return self._paginate(f"/repos/{repository}/issues/{number}/comments")

    def delete_issue_comment(self, repository: str, comment_id: int) -> None:
        self._request("DELETE", f"/repos/{repository}/issues/comments/{comment_id}")
