"""Output mode dispatch — Rich, JSON or quiet.

The CLI hands every ServiceResult to :func:`format_result`, which picks
the representation requested by the global flags.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from dpkgsize.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from dpkgsize.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output-related global flags."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON wins over quiet; quiet wins over the default Rich rendering.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
