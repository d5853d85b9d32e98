"""GitHub Actions run context read from the runner environment."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from lcovdelta.core.errors import GitHubError

PULL_REQUEST = "pull_request"
PUSH = "push"


@dataclass(frozen=True, slots=True)
class GitHubContext:
    """Event data needed to list changes and publish the summary."""

    event_name: str
    repository: str  # owner/repo
    workflow: str = ""
    ref: str = ""
    payload: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> GitHubContext:
        """Build from GITHUB_* variables and the event payload file.

        Raises:
            GitHubError: If a required variable is missing or the payload is unreadable.
        """
        env = os.environ if env is None else env

        for required in ("GITHUB_EVENT_NAME", "GITHUB_REPOSITORY"):
            if not env.get(required):
                raise GitHubError.missing_context(required)

        payload: dict[str, Any] = {}
        if event_path := env.get("GITHUB_EVENT_PATH"):
            try:
                payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise GitHubError.missing_context(f"GITHUB_EVENT_PATH ({e})") from e

        return cls(
            event_name=env["GITHUB_EVENT_NAME"],
            repository=env["GITHUB_REPOSITORY"],
            workflow=env.get("GITHUB_WORKFLOW", ""),
            ref=env.get("GITHUB_REF", ""),
            payload=payload,
        )

    @property
    def is_pull_request(self) -> bool:
        return self.event_name == PULL_REQUEST

    @property
    def is_push(self) -> bool:
        return self.event_name == PUSH

    @property
    def _pull_request(self) -> Mapping[str, Any]:
        return self.payload.get("pull_request") or {}

    @property
    def pr_number(self) -> int | None:
        number = self._pull_request.get("number")
        return int(number) if number is not None else None

    @property
    def commit(self) -> str | None:
        """Commit being reported on."""
        if self.is_pull_request:
            return self._pull_request.get("head", {}).get("sha")
        if self.is_push:
            return self.payload.get("after")
        return None

    @property
    def base_commit(self) -> str | None:
        if self.is_pull_request:
            return self._pull_request.get("base", {}).get("sha")
        if self.is_push:
            return self.payload.get("before")
        return None

    @property
    def head(self) -> str | None:
        """Human-readable name of the reported ref."""
        if self.is_pull_request:
            return self._pull_request.get("head", {}).get("ref")
        if self.is_push:
            return self.ref or None
        return None

    @property
    def base(self) -> str | None:
        """Human-readable name of the ref a pull request merges into."""
        if self.is_pull_request:
            return self._pull_request.get("base", {}).get("ref")
        return None
