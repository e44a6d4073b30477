"""Report pipeline: parse, classify, aggregate, render, write.

The run is all-or-nothing. Every page is rendered in memory before the
output directory is touched, so a malformed profile or a missing source
leaves no partial report behind.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from covhtml.config.models import CovHtmlConfig
from covhtml.core.errors import InternalError, ReportError, SourceUnavailableError
from covhtml.core.logging import get_logger
from covhtml.core.progress import progress
from covhtml.coverage.aggregate import aggregate
from covhtml.coverage.classify import classify_file
from covhtml.coverage.models import ClassifiedFile, FileRecord, Profile, TreeStats
from covhtml.coverage.parser import parse_profile_file, split_locator
from covhtml.report.html import (
    ROOT_INDEX,
    ReportRenderer,
    copy_static_assets,
    directory_page,
    file_page,
)
from covhtml.report.sources import SourceLoader

log = get_logger("report.build")


@dataclass(frozen=True, slots=True)
class CoverageRun:
    """Everything computed from one profile, before rendering."""

    profile: Profile
    files: tuple[ClassifiedFile, ...]
    tree: TreeStats
    skipped: tuple[str, ...] = ()

    @property
    def repo(self) -> str:
        """Repository name shared by the files, or "" if they disagree."""
        repos = {c.stats.path.repo for c in self.files}
        return repos.pop() if len(repos) == 1 else ""


def _classify_one(
    record: FileRecord,
    loader: SourceLoader,
    config: CovHtmlConfig,
) -> ClassifiedFile | None:
    path = split_locator(record.file, config.profile.locator_segments)
    try:
        source_lines = loader.read_lines(record.file, path)
    except SourceUnavailableError as e:
        if config.report.missing_sources == "skip":
            log.warning("source_skipped", file=record.file, path=e.details.get("path"))
            return None
        raise
    return classify_file(
        record,
        source_lines,
        path=path,
        line_counting=config.report.line_counting,
    )


def run_coverage(profile: Profile, loader: SourceLoader, config: CovHtmlConfig) -> CoverageRun:
    """Classify every profiled file and aggregate the results.

    Files are classified on up to ``config.report.workers`` threads; results
    are kept in profile order and aggregated only once all are done.
    """
    records = list(profile.records.values())
    workers = min(config.report.workers, max(len(records), 1))

    results: list[ClassifiedFile | None]
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="covhtml-classify") as ex:
            results = list(
                progress(
                    ex.map(lambda r: _classify_one(r, loader, config), records),
                    desc="Classifying",
                    total=len(records),
                )
            )
    else:
        results = [
            _classify_one(r, loader, config)
            for r in progress(records, desc="Classifying", total=len(records))
        ]

    files = tuple(c for c in results if c is not None)
    skipped = tuple(r.file for r, c in zip(records, results, strict=True) if c is None)
    tree = aggregate(c.stats for c in files)

    log.info(
        "coverage_aggregated",
        files=len(files),
        skipped=len(skipped),
        directories=len(tree.directories),
    )
    return CoverageRun(profile=profile, files=files, tree=tree, skipped=skipped)


def render_pages(run: CoverageRun, renderer: ReportRenderer) -> dict[str, str]:
    """Render every page, keyed by its path relative to the output directory.

    Raises:
        InternalError: Two pages map to the same path. This happens when
            one profile spans several repositories, or when an extensionless
            file is named like a directory index.
    """
    repo = run.repo
    pages = {ROOT_INDEX: renderer.render_index(run.tree, repo=repo)}
    for directory in run.tree.sorted_directories():
        pages[directory_page(directory.directory)] = renderer.render_directory(directory, repo=repo)
    for classified in run.files:
        page = file_page(classified.stats.path)
        if page in pages:
            raise InternalError.unexpected("duplicate report page", page=page)
        pages[page] = renderer.render_file(classified)
    return pages


def write_report(pages: dict[str, str], output_dir: Path) -> None:
    """Write rendered pages and static assets under output_dir."""
    current = output_dir
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        copy_static_assets(output_dir)
        for rel_path, content in pages.items():
            current = output_dir / rel_path
            current.parent.mkdir(parents=True, exist_ok=True)
            current.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ReportError.write_failed(str(current), str(e)) from e


@dataclass(frozen=True, slots=True)
class ReportResult:
    run: CoverageRun
    output_dir: Path
    pages: int


def generate_report(
    profile_path: Path,
    *,
    work_dir: Path,
    config: CovHtmlConfig,
    now: datetime | None = None,
) -> ReportResult:
    """Build the full HTML report for a profile.

    Args:
        profile_path: Coverage profile to read.
        work_dir: Directory source paths are resolved against.
        config: Resolved configuration.
        now: Timestamp shown in page footers (defaults to the current time).

    Raises:
        MalformedProfileError: Profile missing or malformed.
        SourceUnavailableError: A source file is unreadable and
            ``report.missing_sources`` is "fail".
        ReportError: Output could not be written.
    """
    profile = parse_profile_file(profile_path)
    run = run_coverage(profile, SourceLoader(work_dir), config)

    renderer = ReportRenderer(
        watermarks=config.watermarks,
        generated_at=now or datetime.now(UTC),
        mode=profile.mode,
        highlight=config.report.syntax_highlighting,
    )
    pages = render_pages(run, renderer)

    output_dir = Path(config.report.output_dir)
    if not output_dir.is_absolute():
        output_dir = work_dir / output_dir
    write_report(pages, output_dir)

    log.info("report_written", output_dir=str(output_dir), pages=len(pages))
    return ReportResult(run=run, output_dir=output_dir, pages=len(pages))
