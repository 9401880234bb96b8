"""Click classes whose commands take ``examples=``.

``dpkgsize report --examples`` prints the example block and exits; the
help text only carries a one-line pointer to it.
"""

from __future__ import annotations

from typing import Any

import click

_EXAMPLES_HINT = "Run with --examples for usage examples."


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(examples)
    ctx.exit(0)


class _ExamplesMixin:
    """Shared ``examples=`` handling for commands and groups."""

    examples: str | None
    params: list[click.Parameter]
    epilog: str | None

    def _attach_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=_print_examples,
                help="Show usage examples and exit.",
            )
        )
        self.epilog = f"{self.epilog}\n\n{_EXAMPLES_HINT}" if self.epilog else _EXAMPLES_HINT


class DpkgSizeCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)


class DpkgSizeGroup(_ExamplesMixin, click.Group):
    """Root group; subcommands default to :class:`DpkgSizeCommand`."""

    command_class = DpkgSizeCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)
