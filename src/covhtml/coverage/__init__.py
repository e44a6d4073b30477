"""Coverage profile parsing, line classification, and aggregation.

Usage:
    from covhtml.coverage import parse_profile, classify_file, aggregate, split_locator

    profile = parse_profile(Path("coverage.txt").read_text())
    classified = [
        classify_file(record, split_source(source_text), path=split_locator(file))
        for file, record in profile.records.items()
    ]
    tree = aggregate(c.stats for c in classified)
    print(tree.root.branch_pct, watermark(tree.root.branch_pct))
"""

from covhtml.coverage.aggregate import aggregate, sum_totals
from covhtml.coverage.classify import (
    annotate_line,
    classify_file,
    count_uncovered_lines,
    split_source,
)
from covhtml.coverage.metrics import Watermark, is_defined, percentage, watermark
from covhtml.coverage.models import (
    AnnotatedLine,
    ClassifiedFile,
    CoverageRange,
    DirectoryStats,
    FileRecord,
    FileStats,
    LineStatus,
    Position,
    Profile,
    SourcePath,
    Totals,
    TreeStats,
)
from covhtml.coverage.parser import (
    parse_profile,
    parse_profile_file,
    parse_range,
    split_locator,
)

__all__ = [
    # Models
    "AnnotatedLine",
    "ClassifiedFile",
    "CoverageRange",
    "DirectoryStats",
    "FileRecord",
    "FileStats",
    "LineStatus",
    "Position",
    "Profile",
    "SourcePath",
    "Totals",
    "TreeStats",
    # Parser
    "parse_profile",
    "parse_profile_file",
    "parse_range",
    "split_locator",
    # Classifier
    "annotate_line",
    "classify_file",
    "count_uncovered_lines",
    "split_source",
    # Aggregator
    "aggregate",
    "sum_totals",
    # Metrics
    "Watermark",
    "is_defined",
    "percentage",
    "watermark",
]
