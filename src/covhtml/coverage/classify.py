"""Per-file line classification and totals.

Totals and annotations are computed independently:

- Branch totals sum ``branch_count`` over all ranges (covered: ranges with
  hits). Ranges are never deduplicated for branches.
- Uncovered lines are counted from zero-hit ranges. The default "span" mode
  sums ``end.line - start.line`` per zero-hit range without deduplication,
  which keeps legacy report numbers stable and may push
  covered lines below 0 or above the line count. "distinct" counts every
  line inside a zero-hit range exactly once.
- Each line's displayed status comes from the first range, by start line,
  that contains it. This never feeds back into the totals.
"""

from collections.abc import Sequence

from covhtml.config.models import LineCounting
from covhtml.core.logging import get_logger
from covhtml.coverage.models import (
    AnnotatedLine,
    ClassifiedFile,
    CoverageRange,
    FileRecord,
    FileStats,
    LineStatus,
    SourcePath,
    Totals,
)

log = get_logger("coverage.classify")


def split_source(text: str) -> list[str]:
    """Split source text into 1-based lines.

    A trailing newline does not produce an extra empty line, and a CR left
    by CRLF line endings is dropped.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def count_uncovered_lines(
    ranges: Sequence[CoverageRange],
    total_lines: int,
    mode: LineCounting = "span",
) -> int:
    """Count uncovered lines from the zero-hit ranges."""
    uncovered = [r for r in ranges if not r.covered]
    if mode == "span":
        return sum(r.end.line - r.start.line for r in uncovered)

    lines: set[int] = set()
    for r in uncovered:
        lines.update(range(max(r.start.line, 1), min(r.end.line, total_lines) + 1))
    return len(lines)


def annotate_line(number: int, text: str, ranges: Sequence[CoverageRange]) -> AnnotatedLine:
    """Annotate one line from the first range that contains it."""
    for r in ranges:
        if r.contains(number):
            if r.covered:
                return AnnotatedLine(number, text, LineStatus.COVERED, hits=r.hit_count)
            return AnnotatedLine(number, text, LineStatus.UNCOVERED)
    return AnnotatedLine(number, text, LineStatus.NEUTRAL)


def classify_file(
    record: FileRecord,
    source_lines: Sequence[str],
    *,
    path: SourcePath,
    line_counting: LineCounting = "span",
) -> ClassifiedFile:
    """Compute FileStats and line annotations for one file.

    Args:
        record: All profile ranges for the file.
        source_lines: The file's lines as returned by ``split_source``.
        path: Repository-relative location of the file.
        line_counting: "span" (legacy arithmetic) or "distinct".
    """
    ranges = record.sorted_ranges()
    total_lines = len(source_lines)

    total_branches = sum(r.branch_count for r in ranges)
    covered_branches = sum(r.branch_count for r in ranges if r.covered)
    uncovered = count_uncovered_lines(ranges, total_lines, line_counting)

    totals = Totals(
        covered_lines=total_lines - uncovered,
        total_lines=total_lines,
        covered_branches=covered_branches,
        total_branches=total_branches,
    )
    lines = tuple(
        annotate_line(number, text, ranges) for number, text in enumerate(source_lines, start=1)
    )

    log.debug(
        "file_classified",
        path=path.path,
        ranges=len(ranges),
        lines=f"{totals.covered_lines}/{totals.total_lines}",
        branches=f"{covered_branches}/{total_branches}",
    )
    return ClassifiedFile(stats=FileStats(path=path, totals=totals), lines=lines)
