"""Fixtures for CLI tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Working directory with a current report and a baseline next to it."""
    coverage = tmp_path / "coverage"
    coverage.mkdir()
    (coverage / "lcov.info").write_text(
        f"SF:{tmp_path}/src/a.js\n"
        "DA:1,1\n"
        "DA:2,1\n"
        "DA:3,0\n"
        "DA:4,1\n"
        "end_of_record\n"
        f"SF:{tmp_path}/src/b.js\n"
        "DA:1,0\n"
        "end_of_record\n"
    )
    (coverage / "base.info").write_text(
        f"SF:{tmp_path}/src/a.js\n"
        "DA:1,1\n"
        "DA:2,0\n"
        "DA:3,0\n"
        "DA:4,1\n"
        "end_of_record\n"
    )
    return tmp_path
