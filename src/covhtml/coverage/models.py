"""Coverage data model.

Profile records are parsed once into immutable values; every derived
statistic (per file, per directory, whole tree) is a fresh ``Totals``
combined with ``+``, so no counter is shared between scopes.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from covhtml.coverage.metrics import percentage


@dataclass(frozen=True, slots=True)
class Position:
    """1-based line/column position in a source file."""

    line: int
    column: int


@dataclass(frozen=True, slots=True)
class CoverageRange:
    """One profile record: a source span with its branch and hit counts."""

    file: str  # raw profile path, locator included
    start: Position
    end: Position
    branch_count: int
    hit_count: int  # 0 = never executed

    @property
    def covered(self) -> bool:
        return self.hit_count > 0

    def contains(self, line: int) -> bool:
        """Check if a line falls inside the range, both ends inclusive."""
        return self.start.line <= line <= self.end.line


@dataclass(frozen=True, slots=True)
class FileRecord:
    """All ranges recorded for one profile path, in profile order."""

    file: str
    ranges: tuple[CoverageRange, ...] = ()

    def sorted_ranges(self) -> list[CoverageRange]:
        """Ranges ordered by start line; ties keep profile order."""
        return sorted(self.ranges, key=lambda r: r.start.line)


@dataclass(frozen=True, slots=True)
class Profile:
    """A parsed coverage profile.

    ``records`` maps the raw profile path to its FileRecord and keeps the
    order in which files first appear.
    """

    mode: str
    records: Mapping[str, FileRecord] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SourcePath:
    """A profile path split into its repository locator and relative path."""

    locator: tuple[str, ...]
    path: str  # repository-relative, "/"-separated

    @property
    def repo(self) -> str:
        """Repository name (last locator segment), or "" without a locator."""
        return self.locator[-1] if self.locator else ""

    @property
    def directory(self) -> str:
        """Containing directory; "" for files at the repository root."""
        head, _, _ = self.path.rpartition("/")
        return head

    @property
    def name(self) -> str:
        return self.path.rpartition("/")[2]


@dataclass(frozen=True, slots=True)
class Totals:
    """Covered/total line and branch counts for any aggregation scope."""

    covered_lines: int = 0
    total_lines: int = 0
    covered_branches: int = 0
    total_branches: int = 0

    def __add__(self, other: Totals) -> Totals:
        if not isinstance(other, Totals):
            return NotImplemented
        return Totals(
            covered_lines=self.covered_lines + other.covered_lines,
            total_lines=self.total_lines + other.total_lines,
            covered_branches=self.covered_branches + other.covered_branches,
            total_branches=self.total_branches + other.total_branches,
        )

    @property
    def line_pct(self) -> float:
        """Line coverage percent; NaN when there are no lines."""
        return percentage(self.covered_lines, self.total_lines)

    @property
    def branch_pct(self) -> float:
        """Branch coverage percent; NaN when there are no branches."""
        return percentage(self.covered_branches, self.total_branches)


@dataclass(frozen=True, slots=True)
class FileStats:
    path: SourcePath
    totals: Totals


class LineStatus(Enum):
    COVERED = "covered"
    UNCOVERED = "uncovered"
    NEUTRAL = "neutral"  # outside every range, not instrumented


@dataclass(frozen=True, slots=True)
class AnnotatedLine:
    number: int  # 1-based
    text: str
    status: LineStatus
    hits: int | None = None  # only set for covered lines


@dataclass(frozen=True, slots=True)
class ClassifiedFile:
    """Per-file statistics plus the line annotations used for rendering."""

    stats: FileStats
    lines: tuple[AnnotatedLine, ...] = ()


@dataclass(frozen=True, slots=True)
class DirectoryStats:
    directory: str  # "" for the repository root
    files: tuple[FileStats, ...]
    totals: Totals


@dataclass(frozen=True, slots=True)
class TreeStats:
    """Per-directory statistics plus the whole-tree total."""

    directories: Mapping[str, DirectoryStats]
    root: Totals

    def sorted_directories(self) -> list[DirectoryStats]:
        """Directories ordered by key, for stable display."""
        return [self.directories[key] for key in sorted(self.directories)]
