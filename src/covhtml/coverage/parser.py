"""Go coverage profile parser.

``go test -coverprofile`` writes profiles with format:
mode: set|count|atomic
<file>:<startline>.<startcol>,<endline>.<endcol> <numstmt> <count>

Example:
mode: count
github.com/user/repo/pkg/main.go:10.2,12.16 3 1
github.com/user/repo/pkg/main.go:15.2,20.16 5 0

- mode: recorded as-is, never interpreted
- numstmt: number of branch decision points in the range
- count: execution count (0 = not covered)

Unlike a best-effort reader, every data line must match the grammar; the
first bad line aborts the parse with MalformedProfileError.
"""

import re
from pathlib import Path

from covhtml.core.errors import MalformedProfileError
from covhtml.core.logging import get_logger
from covhtml.coverage.models import (
    CoverageRange,
    FileRecord,
    Position,
    Profile,
    SourcePath,
)

log = get_logger("coverage.parser")

MODE_PREFIX = "mode:"

_UINT = re.compile(r"\d+")


def _to_int(token: str, what: str, line_no: int, line: str) -> int:
    if not _UINT.fullmatch(token):
        raise MalformedProfileError.invalid_integer(
            line_no, line, f"{what} must be a non-negative integer, got {token!r}"
        )
    return int(token)


def _parse_position(token: str, what: str, line_no: int, line: str) -> Position:
    parts = token.split(".")
    if len(parts) != 2:
        raise MalformedProfileError.malformed_line(
            line_no, line, f"{what} position must be <line>.<column>, got {token!r}"
        )
    return Position(
        line=_to_int(parts[0], f"{what} line", line_no, line),
        column=_to_int(parts[1], f"{what} column", line_no, line),
    )


def parse_range(line: str, line_no: int) -> CoverageRange:
    """Parse one data line into a CoverageRange.

    Args:
        line: Stripped, non-empty profile line.
        line_no: 1-based line number, for error reporting.

    Raises:
        MalformedProfileError: If the line does not match the grammar.
    """
    parts = line.split()
    if len(parts) != 3:
        raise MalformedProfileError.malformed_line(
            line_no, line, "expected '<file>:<range> <branches> <hits>'"
        )
    path_range, branches, hits = parts

    file, sep, range_part = path_range.rpartition(":")
    if not sep or not file:
        raise MalformedProfileError.malformed_line(line_no, line, "missing '<file>:' prefix")

    bounds = range_part.split(",")
    if len(bounds) != 2:
        raise MalformedProfileError.malformed_line(
            line_no, line, f"range must be <start>,<end>, got {range_part!r}"
        )

    start = _parse_position(bounds[0], "start", line_no, line)
    end = _parse_position(bounds[1], "end", line_no, line)
    if start.line > end.line:
        raise MalformedProfileError.malformed_line(
            line_no, line, f"start line {start.line} is after end line {end.line}"
        )

    return CoverageRange(
        file=file,
        start=start,
        end=end,
        branch_count=_to_int(branches, "branch count", line_no, line),
        hit_count=_to_int(hits, "hit count", line_no, line),
    )


def parse_profile(text: str) -> Profile:
    """Parse profile text into a Profile grouped by file.

    Raises:
        MalformedProfileError: If the mode line is missing or any data line
            is malformed.
    """
    lines = text.splitlines()
    if not lines:
        raise MalformedProfileError.missing_mode()

    mode_line = lines[0].strip()
    mode = mode_line[len(MODE_PREFIX) :].strip()
    if not mode_line.startswith(MODE_PREFIX) or not mode:
        raise MalformedProfileError.missing_mode(mode_line)

    grouped: dict[str, list[CoverageRange]] = {}
    for line_no, raw in enumerate(lines[1:], start=2):
        line = raw.strip()
        if not line:
            continue
        cov_range = parse_range(line, line_no)
        grouped.setdefault(cov_range.file, []).append(cov_range)

    records = {
        file: FileRecord(file=file, ranges=tuple(ranges)) for file, ranges in grouped.items()
    }
    log.debug(
        "profile_parsed",
        mode=mode,
        files=len(records),
        ranges=sum(len(r.ranges) for r in records.values()),
    )
    return Profile(mode=mode, records=records)


def parse_profile_file(path: Path) -> Profile:
    """Read and parse a profile from disk."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedProfileError.not_found(str(path), str(e)) from e
    return parse_profile(text)


def split_locator(file: str, segments: int = 3) -> SourcePath:
    """Strip the leading repository locator from a profile path.

    Args:
        file: Raw profile path, e.g. "github.com/org/repo/pkg/main.go".
        segments: Number of leading segments forming the locator.

    Raises:
        MalformedProfileError: If nothing is left after the locator.
    """
    parts = file.split("/")
    if len(parts) <= segments:
        raise MalformedProfileError.malformed_line(
            0, file, f"path has no segments left after stripping {segments} locator segments"
        )
    return SourcePath(locator=tuple(parts[:segments]), path="/".join(parts[segments:]))
