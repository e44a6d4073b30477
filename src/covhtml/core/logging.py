"""Logging for covhtml runs.

structlog builds the events and stdlib handlers do the I/O, one handler per
configured output. Every event carries the run ID set by the CLI, so several
runs appending to one log file can be told apart.

Usage::

    from covhtml.core.logging import get_logger

    log = get_logger("report.build")
    log.info("report_written", pages=12)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from covhtml.config.models import LoggingConfig, LogOutputConfig

# Module-level, not a ContextVar: classification threads do not inherit contexts
_run_id: str | None = None

# First file output, surfaced in CLI error messages
_log_file_path: Path | None = None


def set_run_id(run_id: str | None = None) -> str:
    """Set the ID stamped on every event of this run, generating one if needed."""
    global _run_id
    _run_id = run_id or uuid4().hex[:12]
    return _run_id


def get_log_file_path() -> Path | None:
    return _log_file_path


def _stamp_run_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if _run_id is not None:
        event_dict.setdefault("run_id", _run_id)
    return event_dict


_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
    _stamp_run_id,  # type: ignore[list-item]
]


class ProgressBarFilter(logging.Filter):
    """Hold back console records while a progress bar is on screen."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        from covhtml.core.progress import is_console_suppressed

        return not is_console_suppressed()


def _open_handler(output: LogOutputConfig) -> logging.Handler:
    handler: logging.Handler
    if output.destination in ("stderr", "stdout"):
        handler = logging.StreamHandler(getattr(sys, output.destination))
        handler.addFilter(ProgressBarFilter())
        return handler

    path = Path(output.destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def _renderer(output: LogOutputConfig) -> structlog.types.Processor:
    if output.format == "json":
        return structlog.processors.JSONRenderer()
    on_terminal = output.destination == "stderr" and sys.stderr.isatty()
    return structlog.dev.ConsoleRenderer(colors=on_terminal)


def configure_logging(config: LoggingConfig, *, verbose: bool = False) -> None:
    """Route structlog events to the configured outputs.

    Replaces any handlers from an earlier call, so it is safe to call once
    per command invocation.

    Args:
        config: Root level and outputs. An output without its own level
            uses the root level.
        verbose: Force DEBUG for the root and for outputs without a level.
    """
    global _log_file_path

    level_names = logging.getLevelNamesMapping()
    root_level = "DEBUG" if verbose else config.level

    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(level_names[root_level]),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in root.handlers:
        old.close()
    root.handlers.clear()
    root.setLevel(level_names[root_level])

    _log_file_path = next(
        (Path(o.destination) for o in config.outputs if o.destination not in ("stderr", "stdout")),
        None,
    )

    for output in config.outputs:
        handler = _open_handler(output)
        handler.setLevel(level_names[output.level or root_level])
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=_renderer(output),
                foreign_pre_chain=_PRE_CHAIN,
            )
        )
        root.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
