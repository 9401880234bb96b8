"""Command: size report for every installed package."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dpkgsize.commands._base import DpkgSizeCommand

if TYPE_CHECKING:
    from dpkgsize.commands._context import AppContext


@click.command(
    cls=DpkgSizeCommand,
    examples="""\
  dpkgsize report
  dpkgsize report --top 20
  dpkgsize report --sort deps --top 10
  dpkgsize -q report > sizes.txt
  dpkgsize --json report""",
)
@click.option(
    "--sort",
    type=click.Choice(["own", "deps"]),
    default=None,
    help="Order by own size or by size with dependencies (ascending).",
)
@click.option("--top", type=click.IntRange(min=1), default=None, help="Only the N largest.")
@click.pass_obj
def report(app: AppContext, sort: str | None, top: int | None) -> None:
    """Own size and size with dependencies of every installed package."""
    cfg = app.settings.report
    app.emit(
        app.inventory.report(
            sort=sort or cfg.sort,  # type: ignore[arg-type]
            top=top if top is not None else cfg.top,
        )
    )
