"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and resets logging between tests.
"""

import logging
import sys
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
# This ensures that the local lcovdelta package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """CLI tests install handlers on streams that CliRunner closes afterwards."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def _no_github_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Runner variables would change prefix resolution and event context."""
    for name in (
        "GITHUB_WORKSPACE",
        "GITHUB_EVENT_NAME",
        "GITHUB_EVENT_PATH",
        "GITHUB_REPOSITORY",
        "GITHUB_WORKFLOW",
        "GITHUB_REF",
        "GITHUB_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
