"""covhtml CLI - covhtml command."""

import click

from covhtml.cli.report import report_command
from covhtml.cli.summary import summary_command
from covhtml.core.logging import set_run_id


@click.group()
@click.version_option(version="0.1.0", prog_name="covhtml")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """covhtml - HTML coverage reports from Go coverage profiles."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    set_run_id()


cli.add_command(report_command, name="report")
cli.add_command(summary_command, name="summary")


if __name__ == "__main__":
    cli()
