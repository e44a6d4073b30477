"""Tests for per-file line classification."""

import pytest

from covhtml.config.models import LineCounting
from covhtml.coverage import (
    ClassifiedFile,
    CoverageRange,
    FileRecord,
    LineStatus,
    Position,
    SourcePath,
    classify_file,
    count_uncovered_lines,
    parse_profile,
    split_locator,
    split_source,
)

FILE = "example.com/org/repo/pkg/file.go"


def _range(start: int, end: int, branches: int, hits: int) -> CoverageRange:
    return CoverageRange(
        file=FILE,
        start=Position(start, 1),
        end=Position(end, 2),
        branch_count=branches,
        hit_count=hits,
    )


def _classify(
    ranges: list[CoverageRange], line_count: int, line_counting: LineCounting = "span"
) -> ClassifiedFile:
    lines = [f"line {i}" for i in range(1, line_count + 1)]
    return classify_file(
        FileRecord(file=FILE, ranges=tuple(ranges)),
        lines,
        path=split_locator(FILE),
        line_counting=line_counting,
    )


class TestSplitSource:
    def test_trailing_newline_is_not_a_line(self) -> None:
        assert split_source("a\nb\n") == ["a", "b"]

    def test_no_trailing_newline(self) -> None:
        assert split_source("a\nb") == ["a", "b"]

    def test_blank_lines_are_kept(self) -> None:
        assert split_source("a\n\n\nb\n") == ["a", "", "", "b"]

    def test_crlf(self) -> None:
        assert split_source("a\r\nb\r\n") == ["a", "b"]

    def test_empty(self) -> None:
        assert split_source("") == []


class TestClassifyTotals:
    """Line and branch totals."""

    def test_sample_profile(self) -> None:
        """A 6-line file with one uncovered and one covered range."""
        # Given
        profile = parse_profile(
            "mode: count\n"
            f"{FILE}:2.1,4.2 1 0\n"
            f"{FILE}:5.1,5.10 1 3\n"
        )

        # When
        classified = classify_file(
            profile.records[FILE],
            [f"l{i}" for i in range(6)],
            path=split_locator(FILE),
        )

        # Then
        totals = classified.stats.totals
        assert totals.total_branches == 2
        assert totals.covered_branches == 1
        assert totals.total_lines == 6
        assert totals.covered_lines == 4
        assert totals.branch_pct == 50.0

    def test_covered_branches_only_count_hit_ranges(self) -> None:
        result = _classify([_range(1, 2, 3, 1), _range(3, 4, 5, 0), _range(5, 5, 2, 9)], 5)
        assert result.stats.totals.total_branches == 10
        assert result.stats.totals.covered_branches == 5

    def test_no_ranges(self) -> None:
        result = _classify([], 3)
        totals = result.stats.totals
        assert (totals.covered_lines, totals.total_lines) == (3, 3)
        assert (totals.covered_branches, totals.total_branches) == (0, 0)

    def test_span_counting_is_not_deduplicated(self) -> None:
        """Nested zero-hit ranges are each counted in span mode."""
        result = _classify([_range(1, 5, 1, 0), _range(2, 4, 1, 0)], 5)
        # (5-1) + (4-2) = 6 uncovered lines in a 5-line file
        assert result.stats.totals.covered_lines == -1

    def test_single_line_zero_hit_range_spans_nothing(self) -> None:
        result = _classify([_range(3, 3, 1, 0)], 4)
        # single-line zero-hit range spans 0 lines
        assert result.stats.totals.covered_lines == 4

    def test_distinct_counting_deduplicates_overlaps(self) -> None:
        result = _classify(
            [_range(1, 5, 1, 0), _range(2, 4, 1, 0)], 5, line_counting="distinct"
        )
        assert result.stats.totals.covered_lines == 0

    def test_distinct_counting_is_inclusive(self) -> None:
        result = _classify([_range(3, 3, 1, 0)], 4, line_counting="distinct")
        assert result.stats.totals.covered_lines == 3

    def test_distinct_counting_clips_to_file(self) -> None:
        result = _classify([_range(3, 10, 1, 0)], 4, line_counting="distinct")
        assert result.stats.totals.covered_lines == 2

    def test_path_is_carried_through(self) -> None:
        result = _classify([], 1)
        assert result.stats.path == SourcePath(
            locator=("example.com", "org", "repo"), path="pkg/file.go"
        )


class TestCountUncoveredLines:
    @pytest.mark.parametrize(
        ("mode", "expected"),
        [("span", 2 + 1), ("distinct", 3 + 2)],
    )
    def test_ignores_covered_ranges(self, mode: LineCounting, expected: int) -> None:
        ranges = [_range(2, 4, 1, 0), _range(2, 9, 1, 5), _range(7, 8, 1, 0)]
        assert count_uncovered_lines(ranges, 10, mode) == expected


class TestAnnotations:
    """Displayed per-line status."""

    def test_statuses(self) -> None:
        result = _classify([_range(2, 3, 1, 0), _range(5, 5, 1, 7)], 6)
        statuses = [(line.number, line.status, line.hits) for line in result.lines]
        assert statuses == [
            (1, LineStatus.NEUTRAL, None),
            (2, LineStatus.UNCOVERED, None),
            (3, LineStatus.UNCOVERED, None),
            (4, LineStatus.NEUTRAL, None),
            (5, LineStatus.COVERED, 7),
            (6, LineStatus.NEUTRAL, None),
        ]

    def test_text_is_preserved(self) -> None:
        result = _classify([], 2)
        assert [line.text for line in result.lines] == ["line 1", "line 2"]

    def test_first_range_by_start_line_wins(self) -> None:
        """Profile order does not matter; the earliest-starting range is shown."""
        result = _classify([_range(3, 4, 1, 0), _range(1, 5, 1, 2)], 5)
        assert result.lines[2].status is LineStatus.COVERED
        assert result.lines[2].hits == 2

    def test_ties_keep_profile_order(self) -> None:
        result = _classify([_range(2, 2, 1, 0), _range(2, 2, 1, 4)], 3)
        assert result.lines[1].status is LineStatus.UNCOVERED

    def test_annotations_do_not_change_totals(self) -> None:
        shown_covered = _classify([_range(1, 3, 1, 2), _range(1, 3, 1, 0)], 3)
        shown_uncovered = _classify([_range(1, 3, 1, 0), _range(1, 3, 1, 2)], 3)
        assert shown_covered.stats.totals == shown_uncovered.stats.totals
        assert shown_covered.lines[0].status is LineStatus.COVERED
        assert shown_uncovered.lines[0].status is LineStatus.UNCOVERED
