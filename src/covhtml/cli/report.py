"""covhtml report command - write the HTML coverage report."""

from pathlib import Path

import click

from covhtml.cli.utils import drop_none, resolve_config, to_click_exception
from covhtml.core.errors import CovHtmlError
from covhtml.core.progress import pluralize, status
from covhtml.report.build import generate_report
from covhtml.report.html import format_pct


@click.command()
@click.argument("profile", default="coverage.txt", type=click.Path(path_type=Path))
@click.option(
    "--cwd",
    "work_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Directory source files are resolved against (default: current directory)",
)
@click.option("-o", "--output", "output_dir", help="Report directory (default: coverage)")
@click.option(
    "--locator-segments",
    type=click.IntRange(min=0),
    help="Leading profile path segments to strip (default: 3)",
)
@click.option(
    "--line-counting",
    type=click.Choice(["span", "distinct"]),
    help="Uncovered line arithmetic: span (legacy) or distinct (overlap-aware)",
)
@click.option(
    "--missing-sources",
    type=click.Choice(["fail", "skip"]),
    help="Abort on unreadable source files, or skip them with a warning",
)
@click.option("-j", "--workers", type=click.IntRange(min=1), help="Classification threads")
@click.option(
    "--highlight/--no-highlight",
    "syntax_highlighting",
    default=None,
    help="Syntax-highlight source pages (default: on)",
)
@click.pass_context
def report_command(
    ctx: click.Context,
    profile: Path,
    work_dir: Path,
    output_dir: str | None,
    locator_segments: int | None,
    line_counting: str | None,
    missing_sources: str | None,
    workers: int | None,
    syntax_highlighting: bool | None,
) -> None:
    """Generate an HTML coverage report.

    PROFILE is the coverage profile, relative to --cwd (default: coverage.txt).
    """
    work_dir = work_dir.resolve()
    config = resolve_config(
        ctx,
        work_dir,
        {
            "profile": drop_none(locator_segments=locator_segments),
            "report": drop_none(
                output_dir=output_dir,
                line_counting=line_counting,
                missing_sources=missing_sources,
                workers=workers,
                syntax_highlighting=syntax_highlighting,
            ),
        },
    )

    try:
        result = generate_report(work_dir / profile, work_dir=work_dir, config=config)
    except CovHtmlError as e:
        raise to_click_exception(e) from e

    run = result.run
    for file in run.skipped:
        status(f"Skipped {file}: source unavailable", style="warning")

    root = run.tree.root
    status(
        f"Wrote {pluralize(result.pages, 'page')} for {pluralize(len(run.files), 'file')} "
        f"to {result.output_dir}",
        style="success",
    )
    status(
        f"Branches {format_pct(root.branch_pct)} ({root.covered_branches}/{root.total_branches}), "
        f"Lines {format_pct(root.line_pct)} ({root.covered_lines}/{root.total_lines})"
    )
