"""Command: one package and everything it pulls in."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dpkgsize.commands._base import DpkgSizeCommand

if TYPE_CHECKING:
    from dpkgsize.commands._context import AppContext


@click.command(
    cls=DpkgSizeCommand,
    examples="""\
  dpkgsize show libreoffice-core
  dpkgsize -q show texlive-full
  dpkgsize --json show python3""",
)
@click.argument("package")
@click.pass_obj
def show(app: AppContext, package: str) -> None:
    """Size breakdown of PACKAGE and its transitive dependencies."""
    app.emit(app.inventory.show(package))
