"""CLI utilities."""

from pathlib import Path
from typing import Any

import click

from covhtml.config.loader import load_config
from covhtml.config.models import CovHtmlConfig
from covhtml.core.errors import CovHtmlError
from covhtml.core.logging import configure_logging, get_log_file_path


def resolve_config(
    ctx: click.Context,
    work_dir: Path,
    overrides: dict[str, dict[str, Any]],
) -> CovHtmlConfig:
    """Load config for a command and configure logging from it.

    Only options the user actually passed appear in ``overrides``, so
    unset flags never shadow YAML or env values.

    Raises:
        click.ClickException: On invalid configuration.
    """
    sections = {key: values for key, values in overrides.items() if values}
    try:
        config = load_config(work_dir, **sections)
    except CovHtmlError as e:
        raise to_click_exception(e) from e

    configure_logging(config.logging, verbose=bool(ctx.obj and ctx.obj.get("verbose")))
    return config


def to_click_exception(error: CovHtmlError) -> click.ClickException:
    """Convert a covhtml error into a user-facing CLI error (exit code 1)."""
    message = str(error)
    if log_path := get_log_file_path():
        message += f"\nSee {log_path} for details."
    return click.ClickException(message)


def drop_none(**values: Any) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}
