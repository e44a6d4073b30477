"""HTML report generation from a coverage profile.

Usage:
    from covhtml.config import load_config
    from covhtml.report import generate_report

    result = generate_report(Path("coverage.txt"), work_dir=Path.cwd(), config=load_config())
    print(result.output_dir / "index.html")
"""

from covhtml.report.build import (
    CoverageRun,
    ReportResult,
    generate_report,
    render_pages,
    run_coverage,
    write_report,
)
from covhtml.report.html import ReportRenderer, copy_static_assets, format_pct
from covhtml.report.sources import SourceLoader

__all__ = [
    "CoverageRun",
    "ReportRenderer",
    "ReportResult",
    "SourceLoader",
    "copy_static_assets",
    "format_pct",
    "generate_report",
    "render_pages",
    "run_coverage",
    "write_report",
]
