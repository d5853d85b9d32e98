"""Tests for the summary pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest

from lcovdelta.config import EmptyChangedPolicy, LcovDeltaConfig, load_config
from lcovdelta.core.errors import MissingReportError
from lcovdelta.ops import read_baseline, resolve_prefix, summarize, summarize_texts

CURRENT = """\
SF:/work/repo/src/a.js
DA:1,1
DA:2,0
end_of_record
SF:/work/repo/src/b.js
DA:1,1
end_of_record
"""

BASELINE = """\
SF:/work/repo/src/a.js
DA:1,0
DA:2,0
end_of_record
"""


def _config(tmp_path: Path, **sections: dict[str, object]) -> LcovDeltaConfig:
    report = {"prefix": "/work/repo", **sections.pop("report", {})}
    return load_config(tmp_path, report=report, **sections)


class TestSummarizeTexts:
    def test_paths_normalized_and_diffed(self, tmp_path: Path) -> None:
        summary = summarize_texts(CURRENT, BASELINE, _config(tmp_path))

        paths = [e.path for e in summary.result.entries]
        assert paths == ["src/a.js", "src/b.js"]
        assert "| src/a.js | 50.00% ▴ +50.00% |" in summary.body
        assert "src/b.js _(new)_" in summary.body
        assert not summary.truncated

    def test_changed_files_filter(self, tmp_path: Path) -> None:
        config = _config(tmp_path, report={"filter_changed_files": True})

        summary = summarize_texts(
            CURRENT, None, config, changed_files=["/work/repo/src/b.js"]
        )

        assert [e.path for e in summary.result.entries] == ["src/b.js"]
        assert "### Coverage Report for Changed Files" in summary.body

    def test_changed_files_ignored_without_flag(self, tmp_path: Path) -> None:
        summary = summarize_texts(CURRENT, None, _config(tmp_path), changed_files=["src/b.js"])

        assert len(summary.result.entries) == 2
        assert "### Coverage Report\n" in summary.body

    @pytest.mark.parametrize(
        ("policy", "expected"),
        [(EmptyChangedPolicy.PASS_THROUGH, 2), (EmptyChangedPolicy.FILTER_TO_EMPTY, 0)],
    )
    def test_empty_changed_set_policy(
        self, tmp_path: Path, policy: EmptyChangedPolicy, expected: int
    ) -> None:
        config = _config(
            tmp_path,
            report={"filter_changed_files": True, "empty_changed_policy": policy.value},
        )

        summary = summarize_texts(CURRENT, None, config, changed_files=[])

        assert len(summary.result.entries) == expected

    def test_head_and_base_in_headline(self, tmp_path: Path) -> None:
        summary = summarize_texts(
            CURRENT, BASELINE, _config(tmp_path), head="feature", base="main"
        )

        assert "Coverage after merging **feature** into **main**" in summary.body

    def test_truncated_at_line_boundary(self, tmp_path: Path) -> None:
        config = _config(tmp_path, render={"max_chars": 120})

        summary = summarize_texts(CURRENT, None, config)

        assert summary.truncated
        assert len(summary.body) <= 120
        full = summarize_texts(CURRENT, None, _config(tmp_path, render={"max_chars": 0}))
        assert full.body.startswith(summary.body + "\n")

    def test_malformed_baseline_degrades(self, tmp_path: Path) -> None:
        """An error page saved as the baseline still gives a no-baseline summary."""
        current = "SF:src/a.js\nDA:1,1\nDA:2,0\nend_of_record\n"

        summary = summarize_texts(current, "<html>502 Bad Gateway</html>\n", _config(tmp_path))

        assert not summary.result.has_baseline
        assert "| src/a.js | 50.00% |" in summary.body
        assert "▴" not in summary.body
        assert "▾" not in summary.body


class TestWorkingDirectory:
    """Reports written inside a subdirectory of the repository."""

    MONOREPO = """\
SF:src/a.js
DA:1,1
DA:2,0
end_of_record
SF:/work/repo/packages/app/src/b.js
DA:1,1
end_of_record
"""

    def test_relative_paths_rebased_onto_working_directory(self, tmp_path: Path) -> None:
        config = _config(tmp_path, report={"working_directory": "/work/repo/packages/app"})

        summary = summarize_texts(self.MONOREPO, None, config)

        paths = [e.path for e in summary.result.entries]
        assert paths == ["packages/app/src/a.js", "packages/app/src/b.js"]

    def test_changed_files_match_rebased_paths(self, tmp_path: Path) -> None:
        config = _config(
            tmp_path,
            report={"working_directory": "/work/repo/packages/app", "filter_changed_files": True},
        )

        summary = summarize_texts(
            self.MONOREPO, None, config, changed_files=["packages/app/src/a.js"]
        )

        assert [e.path for e in summary.result.entries] == ["packages/app/src/a.js"]

    def test_baseline_rebased_the_same_way(self, tmp_path: Path) -> None:
        config = _config(tmp_path, report={"working_directory": "/work/repo/packages/app"})
        baseline = "SF:src/a.js\nDA:1,0\nDA:2,0\nend_of_record\n"

        summary = summarize_texts(self.MONOREPO, baseline, config)

        entry = summary.result.entries[0]
        assert entry.path == "packages/app/src/a.js"
        assert not entry.is_new

    def test_relative_working_directory_under_github_workspace(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        workspace = tmp_path.resolve()
        monkeypatch.chdir(workspace)
        monkeypatch.setenv("GITHUB_WORKSPACE", str(workspace))
        config = load_config(
            workspace,
            report={"working_directory": "packages/app", "filter_changed_files": True},
        )

        summary = summarize_texts(
            "SF:src/a.js\nDA:1,1\nend_of_record\n",
            None,
            config,
            changed_files=["packages/app/src/a.js"],
        )

        assert [e.path for e in summary.result.entries] == ["packages/app/src/a.js"]

    def test_working_directory_at_prefix_leaves_paths(self, tmp_path: Path) -> None:
        config = _config(tmp_path, report={"working_directory": "/work/repo"})

        summary = summarize_texts(self.MONOREPO, None, config)

        paths = [e.path for e in summary.result.entries]
        assert paths == ["packages/app/src/b.js", "src/a.js"]


class TestReadReports:
    def test_missing_current_report(self, tmp_path: Path) -> None:
        config = _config(tmp_path, report={"working_directory": str(tmp_path)})

        with pytest.raises(MissingReportError) as exc_info:
            summarize(config)

        assert exc_info.value.details["path"] == str(tmp_path / "coverage" / "lcov.info")

    def test_empty_current_report(self, tmp_path: Path) -> None:
        report = tmp_path / "coverage" / "lcov.info"
        report.parent.mkdir()
        report.write_text("\n  \n")
        config = _config(tmp_path, report={"working_directory": str(tmp_path)})

        with pytest.raises(MissingReportError, match="empty"):
            summarize(config)

    def test_missing_baseline_degrades(self, tmp_path: Path) -> None:
        report = tmp_path / "coverage" / "lcov.info"
        report.parent.mkdir()
        report.write_text(CURRENT)
        config = _config(
            tmp_path,
            report={
                "working_directory": str(tmp_path),
                "lcov_base": str(tmp_path / "missing.info"),
            },
        )

        summary = summarize(config)

        assert not summary.result.has_baseline
        assert "▴" not in summary.body

    def test_read_baseline_none(self) -> None:
        assert read_baseline(None) is None


class TestResolvePrefix:
    def test_configured_prefix_wins(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GITHUB_WORKSPACE", "/github/workspace")

        assert resolve_prefix(_config(tmp_path)) == "/work/repo"

    def test_github_workspace(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_WORKSPACE", "/github/workspace")

        assert resolve_prefix(load_config(tmp_path)) == "/github/workspace"

    def test_working_directory_fallback(self, tmp_path: Path) -> None:
        config = load_config(tmp_path, report={"working_directory": str(tmp_path)})

        assert resolve_prefix(config) == str(tmp_path.resolve())
