"""lcovdelta error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Report
- 4xxx: GitHub
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Report (3xxx)
    REPORT_MISSING = 3001
    REPORT_BASELINE_MISSING = 3002
    REPORT_MALFORMED = 3003
    REPORT_RECORD_MALFORMED = 3004

    # GitHub (4xxx)
    GITHUB_API_ERROR = 4001
    GITHUB_UNSUPPORTED_EVENT = 4002
    GITHUB_MISSING_TOKEN = 4003
    GITHUB_MISSING_CONTEXT = 4004


@dataclass(frozen=True, slots=True)
class LcovDeltaError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'REPORT_MISSING')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(LcovDeltaError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class MissingReportError(LcovDeltaError):
    """The current coverage report could not be read."""

    @classmethod
    def at(cls, path: str, reason: str = "file not found") -> "MissingReportError":
        return cls(
            code=ErrorCode.REPORT_MISSING,
            message=f"No coverage report found at '{path}': {reason}",
            details={"path": path, "reason": reason},
        )


class MissingBaselineError(LcovDeltaError):
    """The baseline report was requested but could not be read."""

    @classmethod
    def at(cls, path: str, reason: str = "file not found") -> "MissingBaselineError":
        return cls(
            code=ErrorCode.REPORT_BASELINE_MISSING,
            message=f"No baseline coverage report found at '{path}': {reason}",
            details={"path": path, "reason": reason},
        )


class MalformedReportError(LcovDeltaError):
    """Report text cannot be interpreted as LCOV at all."""

    @classmethod
    def no_directives(cls, line_count: int) -> "MalformedReportError":
        return cls(
            code=ErrorCode.REPORT_MALFORMED,
            message=f"No LCOV directives found in {line_count} non-blank lines",
            details={"line_count": line_count},
        )


class MalformedRecordError(LcovDeltaError):
    """A single directive could not be parsed. Recoverable: the parser skips it."""

    @classmethod
    def bad_directive(cls, lineno: int, line: str, reason: str) -> "MalformedRecordError":
        return cls(
            code=ErrorCode.REPORT_RECORD_MALFORMED,
            message=f"Line {lineno}: {reason}",
            retryable=False,
            details={"lineno": lineno, "line": line, "reason": reason},
        )


class GitHubError(LcovDeltaError):
    """Errors talking to the GitHub API or reading the Actions context."""

    @classmethod
    def api_error(cls, method: str, url: str, status: int, body: str) -> "GitHubError":
        return cls(
            code=ErrorCode.GITHUB_API_ERROR,
            message=f"{method} {url} failed with HTTP {status}",
            retryable=status >= 500 or status == 429,
            details={"method": method, "url": url, "status": status, "body": body[:500]},
        )

    @classmethod
    def unsupported_event(cls, event_name: str) -> "GitHubError":
        return cls(
            code=ErrorCode.GITHUB_UNSUPPORTED_EVENT,
            message=f"Unsupported event '{event_name}': expected pull_request or push",
            details={"event_name": event_name},
        )

    @classmethod
    def missing_token(cls) -> "GitHubError":
        return cls(
            code=ErrorCode.GITHUB_MISSING_TOKEN,
            message="GitHub token required. Set LCOVDELTA__GITHUB__TOKEN or pass --github-token",
        )

    @classmethod
    def missing_context(cls, variable: str) -> "GitHubError":
        return cls(
            code=ErrorCode.GITHUB_MISSING_CONTEXT,
            message=f"GitHub Actions context unavailable: {variable} is not set",
            details={"variable": variable},
        )
