"""covhtml summary command - print coverage totals without writing files."""

import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from covhtml.cli.utils import drop_none, resolve_config, to_click_exception
from covhtml.core.errors import CovHtmlError
from covhtml.coverage.metrics import is_defined, watermark
from covhtml.coverage.models import Totals
from covhtml.coverage.parser import parse_profile_file
from covhtml.report.build import run_coverage
from covhtml.report.html import format_pct
from covhtml.report.sources import SourceLoader

_WATERMARK_STYLES = {"low": "red", "medium": "yellow", "high": "green"}


def _totals_dict(totals: Totals) -> dict[str, Any]:
    return {
        "covered_lines": totals.covered_lines,
        "total_lines": totals.total_lines,
        "line_coverage_percent": round(totals.line_pct, 2) if is_defined(totals.line_pct) else None,
        "covered_branches": totals.covered_branches,
        "total_branches": totals.total_branches,
        "branch_coverage_percent": (
            round(totals.branch_pct, 2) if is_defined(totals.branch_pct) else None
        ),
    }


@click.command()
@click.argument("profile", default="coverage.txt", type=click.Path(path_type=Path))
@click.option(
    "--cwd",
    "work_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Directory source files are resolved against (default: current directory)",
)
@click.option("--locator-segments", type=click.IntRange(min=0), help="Locator segments to strip")
@click.option("--line-counting", type=click.Choice(["span", "distinct"]))
@click.option("--missing-sources", type=click.Choice(["fail", "skip"]))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def summary_command(
    ctx: click.Context,
    profile: Path,
    work_dir: Path,
    locator_segments: int | None,
    line_counting: str | None,
    missing_sources: str | None,
    as_json: bool,
) -> None:
    """Print per-directory coverage totals.

    PROFILE is the coverage profile, relative to --cwd (default: coverage.txt).
    """
    work_dir = work_dir.resolve()
    config = resolve_config(
        ctx,
        work_dir,
        {
            "profile": drop_none(locator_segments=locator_segments),
            "report": drop_none(line_counting=line_counting, missing_sources=missing_sources),
        },
    )

    try:
        parsed = parse_profile_file(work_dir / profile)
        run = run_coverage(parsed, SourceLoader(work_dir), config)
    except CovHtmlError as e:
        raise to_click_exception(e) from e

    directories = run.tree.sorted_directories()

    if as_json:
        click.echo(
            json.dumps(
                {
                    "mode": parsed.mode,
                    "summary": _totals_dict(run.tree.root),
                    "directories": [
                        {"directory": d.directory, **_totals_dict(d.totals)} for d in directories
                    ],
                    "skipped": list(run.skipped),
                }
            )
        )
        return

    marks = config.watermarks

    def styled(pct: float) -> str:
        text = format_pct(pct)
        if not is_defined(pct):
            return f"[dim]{text}[/dim]"
        style = _WATERMARK_STYLES[watermark(pct, low=marks.low, high=marks.high).value]
        return f"[{style}]{text}[/{style}]"

    table = Table(title=f"Coverage ({parsed.mode})")
    table.add_column("Directory")
    table.add_column("Branches", justify="right")
    table.add_column("", justify="right", style="dim")
    table.add_column("Lines", justify="right")
    table.add_column("", justify="right", style="dim")

    rows = [(d.directory or "/", d.totals) for d in directories]
    rows.append(("All files", run.tree.root))
    for i, (label, totals) in enumerate(rows):
        table.add_row(
            label,
            styled(totals.branch_pct),
            f"{totals.covered_branches}/{totals.total_branches}",
            styled(totals.line_pct),
            f"{totals.covered_lines}/{totals.total_lines}",
            end_section=i == len(rows) - 2,
        )

    Console().print(table)
