"""Command: dependencies that match no installed package."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dpkgsize.commands._base import DpkgSizeCommand

if TYPE_CHECKING:
    from dpkgsize.commands._context import AppContext


@click.command(
    cls=DpkgSizeCommand,
    examples="""\
  dpkgsize unresolved
  dpkgsize --json unresolved""",
)
@click.pass_obj
def unresolved(app: AppContext) -> None:
    """List declared dependencies not satisfied by any installed package."""
    app.emit(app.inventory.unresolved())
