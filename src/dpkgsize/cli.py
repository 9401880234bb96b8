"""Root CLI group for dpkgsize with global flags and command registration."""

from __future__ import annotations

import click

from dpkgsize import __version__
from dpkgsize.commands import register_commands
from dpkgsize.commands._base import DpkgSizeGroup
from dpkgsize.commands._context import AppContext
from dpkgsize.config.settings import DpkgSizeSettings


@click.group(
    cls=DpkgSizeGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    examples="""\
  dpkgsize report
  dpkgsize show firefox-esr
  dpkgsize -v report --top 5
  dpkgsize --log-json unresolved""",
)
@click.version_option(version=__version__, prog_name="dpkgsize")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Plain one-line-per-package output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and timing details.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Use this dpkgsize.toml instead of searching for one.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """dpkgsize — disk footprint of installed Debian packages, with dependencies."""
    settings = DpkgSizeSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
