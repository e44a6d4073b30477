"""Source file resolution and reading.

Profile paths carry a repository locator (host/org/repo) in front of the
repository-relative path; the locator is stripped and the remainder is
resolved against the working directory the report is built from.
"""

from pathlib import Path

from covhtml.core.errors import SourceUnavailableError
from covhtml.coverage.classify import split_source
from covhtml.coverage.models import SourcePath


class SourceLoader:
    """Reads profiled source files relative to a working directory."""

    def __init__(self, work_dir: Path) -> None:
        self._work_dir = work_dir

    @property
    def work_dir(self) -> Path:
        return self._work_dir

    def resolve(self, path: SourcePath) -> Path:
        return self._work_dir / path.path

    def read_lines(self, file: str, path: SourcePath) -> list[str]:
        """Read a source file and split it into lines.

        Bytes that are not valid UTF-8 become U+FFFD rather than failing the
        run.

        Args:
            file: Raw profile path, for error reporting.
            path: Stripped, repository-relative path.

        Raises:
            SourceUnavailableError: If the file is missing or unreadable.
        """
        resolved = self.resolve(path)
        try:
            text = resolved.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise SourceUnavailableError.unreadable(file, str(resolved), str(e)) from e
        return split_source(text)
