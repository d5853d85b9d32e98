"""Fixtures for GitHub tests: an in-memory API behind httpx.MockTransport."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from lcovdelta.github import GitHubClient, GitHubContext


@dataclass
class FakeGitHub:
    """Records requests and answers from canned route -> (status, json) entries."""

    routes: dict[tuple[str, str], tuple[int, Any]] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def add(self, method: str, path: str, payload: Any, status: int = 200) -> None:
        self.routes[(method, path)] = (status, payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"message": "Not Found"})
        status, payload = self.routes[key]
        if callable(payload):
            payload = payload(request)
        return httpx.Response(status, json=payload)

    def sent(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]

    @staticmethod
    def body(request: httpx.Request) -> dict[str, Any]:
        data: dict[str, Any] = json.loads(request.content)
        return data


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def client(fake_github: FakeGitHub) -> GitHubClient:
    return GitHubClient(
        "test-token",
        api_url="https://api.github.test",
        transport=httpx.MockTransport(fake_github.handler),
    )


@pytest.fixture
def pr_context() -> GitHubContext:
    return GitHubContext(
        event_name="pull_request",
        repository="octo/repo",
        workflow="CI",
        payload={
            "pull_request": {
                "number": 7,
                "head": {"ref": "feature", "sha": "h" * 40},
                "base": {"ref": "main", "sha": "b" * 40},
            }
        },
    )


@pytest.fixture
def push_context() -> GitHubContext:
    return GitHubContext(
        event_name="push",
        repository="octo/repo",
        workflow="CI",
        ref="refs/heads/main",
        payload={"before": "a" * 40, "after": "c" * 40},
    )
