"""Directory and whole-tree aggregation.

Each file contributes to its immediate directory and to the root, nothing
in between. Totals are summed with ``Totals.__add__`` starting from a fresh
zero value per scope, so the result does not depend on input order.
"""

from collections.abc import Iterable
from functools import reduce
from operator import add

from covhtml.coverage.models import DirectoryStats, FileStats, Totals, TreeStats


def sum_totals(stats: Iterable[FileStats]) -> Totals:
    return reduce(add, (s.totals for s in stats), Totals())


def aggregate(file_stats: Iterable[FileStats]) -> TreeStats:
    """Group FileStats by directory and sum every scope.

    Args:
        file_stats: Every classified file of the run. Consumed fully before
            any total is computed.

    Returns:
        TreeStats keyed by directory ("" for the repository root).
    """
    by_directory: dict[str, list[FileStats]] = {}
    for stats in file_stats:
        by_directory.setdefault(stats.path.directory, []).append(stats)

    directories = {
        directory: DirectoryStats(
            directory=directory,
            files=tuple(files),
            totals=sum_totals(files),
        )
        for directory, files in by_directory.items()
    }
    root = reduce(add, (d.totals for d in directories.values()), Totals())
    return TreeStats(directories=directories, root=root)
