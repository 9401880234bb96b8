"""Subcommand modules for dpkgsize.

Provides register_commands() which uses deferred imports to keep
``dpkgsize --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from dpkgsize.commands.report import report
    from dpkgsize.commands.show import show
    from dpkgsize.commands.unresolved import unresolved

    cli.add_command(report)
    cli.add_command(show)
    cli.add_command(unresolved)
