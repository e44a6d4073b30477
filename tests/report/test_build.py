"""Tests for the end-to-end report pipeline."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from covhtml.config.models import CovHtmlConfig
from covhtml.core.errors import InternalError, MalformedProfileError, SourceUnavailableError
from covhtml.coverage import Totals, parse_profile
from covhtml.report.build import generate_report, run_coverage
from covhtml.report.sources import SourceLoader

NOW = datetime(2024, 5, 1, tzinfo=UTC)


def _config(**report: object) -> CovHtmlConfig:
    return CovHtmlConfig.model_validate({"report": report})


def _write_two_file_repo(work_dir: Path) -> None:
    (work_dir / "pkg").mkdir(parents=True)
    (work_dir / "pkg" / "a.go").write_text("".join(f"a{i}\n" for i in range(5)))
    (work_dir / "pkg" / "b.go").write_text("".join(f"b{i}\n" for i in range(5)))
    (work_dir / "coverage.txt").write_text(
        "mode: set\n"
        "example.com/org/repo/pkg/a.go:1.1,5.2 2 1\n"
        "example.com/org/repo/pkg/b.go:1.1,3.2 2 0\n"
    )


class TestGenerateReport:
    def test_writes_full_tree(self, go_repo: Path) -> None:
        # Given
        config = CovHtmlConfig()

        # When
        result = generate_report(
            go_repo / "coverage.txt", work_dir=go_repo, config=config, now=NOW
        )

        # Then
        out = go_repo / "coverage"
        assert result.output_dir == out
        assert result.pages == 3
        for rel in (
            "index.html",
            "pkg/index.html",
            "pkg/file.go.html",
            "base.css",
            "sorter.js",
            "highlight.css",
        ):
            assert (out / rel).is_file(), rel

        stats = result.run.files[0].stats
        assert stats.path.path == "pkg/file.go"
        assert stats.totals == Totals(
            covered_lines=4, total_lines=6, covered_branches=1, total_branches=2
        )
        assert result.run.tree.root == stats.totals

    def test_absolute_output_dir(self, go_repo: Path, tmp_path: Path) -> None:
        out = tmp_path / "elsewhere"
        result = generate_report(
            go_repo / "coverage.txt", work_dir=go_repo, config=_config(output_dir=str(out))
        )
        assert result.output_dir == out
        assert (out / "index.html").is_file()

    def test_malformed_profile_writes_nothing(self, go_repo: Path) -> None:
        (go_repo / "coverage.txt").write_text(
            "mode: count\nexample.com/org/repo/pkg/file.go:2.1,4.2\n"
        )
        with pytest.raises(MalformedProfileError):
            generate_report(go_repo / "coverage.txt", work_dir=go_repo, config=CovHtmlConfig())
        assert not (go_repo / "coverage").exists()

    def test_missing_source_fails_by_default(self, go_repo: Path) -> None:
        (go_repo / "pkg" / "file.go").unlink()
        with pytest.raises(SourceUnavailableError):
            generate_report(go_repo / "coverage.txt", work_dir=go_repo, config=CovHtmlConfig())
        assert not (go_repo / "coverage").exists()

    def test_missing_source_can_be_skipped(self, go_repo: Path) -> None:
        with (go_repo / "coverage.txt").open("a") as f:
            f.write("example.com/org/repo/gone/x.go:1.1,2.2 1 0\n")

        result = generate_report(
            go_repo / "coverage.txt",
            work_dir=go_repo,
            config=_config(missing_sources="skip"),
        )

        assert result.run.skipped == ("example.com/org/repo/gone/x.go",)
        assert [c.stats.path.path for c in result.run.files] == ["pkg/file.go"]
        assert not (go_repo / "coverage" / "gone").exists()

    def test_colliding_pages_write_nothing(self, go_repo: Path) -> None:
        # Given two repositories that both profile pkg/file.go
        with (go_repo / "coverage.txt").open("a") as f:
            f.write("example.com/org/other/pkg/file.go:1.1,2.2 1 1\n")

        # When / Then
        with pytest.raises(InternalError) as exc_info:
            generate_report(go_repo / "coverage.txt", work_dir=go_repo, config=CovHtmlConfig())
        assert exc_info.value.details["page"] == "pkg/file.go.html"
        assert not (go_repo / "coverage").exists()

    def test_highlighting_can_be_disabled(self, go_repo: Path) -> None:
        on = generate_report(go_repo / "coverage.txt", work_dir=go_repo, config=CovHtmlConfig())
        page = on.output_dir / "pkg" / "file.go.html"
        assert 'class="hl-' in page.read_text()

        generate_report(
            go_repo / "coverage.txt",
            work_dir=go_repo,
            config=_config(syntax_highlighting=False),
        )
        assert 'class="hl-' not in page.read_text()
        assert "func Add(a, b int) int {" in page.read_text()


class TestRunCoverage:
    def test_two_files_one_directory(self, tmp_path: Path) -> None:
        _write_two_file_repo(tmp_path)
        profile = parse_profile((tmp_path / "coverage.txt").read_text())

        run = run_coverage(profile, SourceLoader(tmp_path), CovHtmlConfig())

        pkg = run.tree.directories["pkg"]
        assert pkg.totals == Totals(
            covered_lines=8, total_lines=10, covered_branches=2, total_branches=4
        )
        assert run.tree.root == pkg.totals
        assert run.repo == "repo"

    def test_workers_do_not_change_results(self, tmp_path: Path) -> None:
        _write_two_file_repo(tmp_path)
        profile = parse_profile((tmp_path / "coverage.txt").read_text())
        loader = SourceLoader(tmp_path)

        serial = run_coverage(profile, loader, CovHtmlConfig())
        threaded = run_coverage(profile, loader, _config(workers=4))

        assert threaded.files == serial.files
        assert threaded.tree.root == serial.tree.root

    def test_distinct_line_counting(self, tmp_path: Path) -> None:
        _write_two_file_repo(tmp_path)
        profile = parse_profile((tmp_path / "coverage.txt").read_text())

        run = run_coverage(profile, SourceLoader(tmp_path), _config(line_counting="distinct"))

        # b.go: lines 1-3 uncovered, counted inclusively
        b = next(c for c in run.files if c.stats.path.name == "b.go")
        assert b.stats.totals.covered_lines == 2

    def test_locator_segments(self, tmp_path: Path) -> None:
        (tmp_path / "pkg").mkdir()
        (tmp_path / "pkg" / "a.go").write_text("x\n")
        profile = parse_profile("mode: set\nmodule/pkg/a.go:1.1,1.2 1 1\n")
        config = CovHtmlConfig.model_validate({"profile": {"locator_segments": 1}})

        run = run_coverage(profile, SourceLoader(tmp_path), config)

        assert run.files[0].stats.path.path == "pkg/a.go"
        assert run.repo == "module"
