"""HTML rendering of classified coverage with Jinja2.

Page layout under the output directory:

    index.html              all directories
    files.html              files at the repository root (directory "")
    <dir>/index.html        files directly in <dir>
    <path>.html             one annotated page per source file

Every template receives ``prefix``, the relative path back to the output
root, so the static assets resolve from any depth. Source pages get their
code as pre-rendered Markup, highlighted by Pygments when a lexer matches
the file name.
"""

from __future__ import annotations

import functools
import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import pygments
from jinja2 import Environment, PackageLoader
from markupsafe import Markup, escape
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from covhtml.config.models import WatermarkConfig
from covhtml.coverage.metrics import is_defined, watermark
from covhtml.coverage.models import ClassifiedFile, DirectoryStats, SourcePath, TreeStats

STATIC_DIR = Path(__file__).parent / "static"
STATIC_FILES = ("base.css", "sorter.js", "block-navigation.js")
HIGHLIGHT_CSS = "highlight.css"

ROOT_INDEX = "index.html"
ROOT_FILES_INDEX = "files.html"


@functools.lru_cache(maxsize=1)
def templates() -> Environment:
    """Get the Jinja2 environment for the bundled templates."""
    return Environment(
        loader=PackageLoader("covhtml.report"),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


@functools.lru_cache(maxsize=1)
def _formatter() -> HtmlFormatter:
    # Token classes are prefixed so they cannot clash with the report's own CSS
    return HtmlFormatter(nowrap=True, classprefix="hl-")


def highlight_lines(filename: str, lines: Sequence[str]) -> list[Markup]:
    """Highlight source lines, keeping one output line per input line.

    The lexer is picked from the file name. Files without a matching lexer
    come back as escaped plain text.
    """
    plain = [escape(line) for line in lines]
    if not lines:
        return plain
    try:
        lexer = get_lexer_for_filename(filename, stripnl=False)
    except ClassNotFound:
        return plain

    # HtmlFormatter closes every span at line ends, so splitting is safe.
    # The output ends with a newline, leaving one empty trailing item.
    highlighted = pygments.highlight("\n".join(lines), lexer, _formatter()).split("\n")
    if len(highlighted) != len(lines) + 1:
        return plain
    return [Markup(line) for line in highlighted[:-1]]


def file_page(path: SourcePath) -> str:
    return f"{path.path}.html"


def directory_page(directory: str) -> str:
    return f"{directory}/index.html" if directory else ROOT_FILES_INDEX


def _prefix(page: str) -> str:
    return "../" * page.count("/")


def format_pct(pct: float) -> str:
    """Format a percentage for display; undefined percentages show N/A."""
    return f"{pct:.2f}%" if is_defined(pct) else "N/A"


@dataclass(frozen=True, slots=True)
class ReportRenderer:
    """Renders report pages to strings."""

    watermarks: WatermarkConfig
    generated_at: datetime
    mode: str = ""
    highlight: bool = True

    def css_class(self, pct: float) -> str:
        """Watermark class for a percentage; 'empty' when undefined."""
        if not is_defined(pct):
            return "empty"
        return watermark(pct, low=self.watermarks.low, high=self.watermarks.high).value

    def bar_width(self, pct: float) -> int:
        return int(pct) if is_defined(pct) else 0

    def _render(self, template: str, page: str, **context: object) -> str:
        return (
            templates()
            .get_template(template)
            .render(
                prefix=_prefix(page),
                generated_at=self.generated_at.isoformat(timespec="seconds"),
                mode=self.mode,
                format_pct=format_pct,
                css_class=self.css_class,
                bar_width=self.bar_width,
                **context,
            )
        )

    def render_file(self, classified: ClassifiedFile) -> str:
        path = classified.stats.path
        page = file_page(path)
        return self._render(
            "file.html.j2",
            page,
            title=f"{path.repo}/{path.path}" if path.repo else path.path,
            path=path,
            directory_href=_prefix(page) + directory_page(path.directory),
            totals=classified.stats.totals,
            lines=classified.lines,
            code=self._source(classified),
        )

    def _source(self, classified: ClassifiedFile) -> list[Markup]:
        texts = [line.text for line in classified.lines]
        if self.highlight:
            return highlight_lines(classified.stats.path.name, texts)
        return [escape(text) for text in texts]

    def render_directory(self, directory: DirectoryStats, repo: str = "") -> str:
        page = directory_page(directory.directory)
        label = "/".join(part for part in (repo, directory.directory) if part) or "/"
        entries = [
            (stats.path.name, file_page(stats.path).rpartition("/")[2], stats.totals)
            for stats in sorted(directory.files, key=lambda s: s.path.name)
        ]
        return self._render(
            "directory.html.j2",
            page,
            title=label,
            totals=directory.totals,
            name_header="File",
            entries=entries,
        )

    def render_index(self, tree: TreeStats, repo: str = "") -> str:
        entries = [
            (d.directory or "/", directory_page(d.directory), d.totals)
            for d in tree.sorted_directories()
        ]
        return self._render(
            "index.html.j2",
            ROOT_INDEX,
            title="All files",
            repo=repo,
            totals=tree.root,
            name_header="Directory",
            entries=entries,
        )


def copy_static_assets(output_dir: Path) -> None:
    """Copy the bundled CSS/JS assets into the report root.

    The Pygments token styles are generated into highlight.css, scoped to
    the source column.
    """
    for name in STATIC_FILES:
        shutil.copyfile(STATIC_DIR / name, output_dir / name)
    (output_dir / HIGHLIGHT_CSS).write_text(
        _formatter().get_style_defs("pre.source"), encoding="utf-8"
    )
