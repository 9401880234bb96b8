"""AppContext: the object behind ``@click.pass_obj``.

Setting up logging happens when the root group runs. dpkg-query is only
touched when a command first asks for :attr:`AppContext.inventory`, so
``--help``, ``--version`` and ``--examples`` work on any host.
"""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING

import click

from dpkgsize.config.logging import configure_logging
from dpkgsize.output.formatters import OutputSettings, format_result
from dpkgsize.services.telemetry import set_timing

if TYPE_CHECKING:
    from dpkgsize.config.settings import DpkgSizeSettings
    from dpkgsize.services.inventory import InventoryService
    from dpkgsize.services.result import ServiceResult


class AppContext:
    def __init__(self, settings: DpkgSizeSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        set_timing(settings.verbose)

    @cached_property
    def inventory(self) -> InventoryService:
        # Resolved at call time so tests can swap DpkgQuery for a fake source.
        from dpkgsize.infrastructure import dpkg
        from dpkgsize.services.inventory import InventoryService

        source = dpkg.DpkgQuery(self.settings.query.dpkg_query)
        return InventoryService(source, self.settings.query)

    @cached_property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; exit 1 when it carries an error.

        The report goes to stdout and nothing else does: warnings and errors
        are written to stderr. With ``--json`` the warnings stay inside the
        payload.
        """
        text = format_result(result, settings=self.output_settings)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if self.output_settings.json_output:
            return
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
