"""Locate and read ``dpkgsize.toml``.

Lookup order: ``--config``, then ``$DPKGSIZE_CONFIG``, then the first
``dpkgsize.toml`` found walking up from the working directory.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

CONFIG_FILENAME = "dpkgsize.toml"
CONFIG_ENV_VAR = "DPKGSIZE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), if any.

    A ``$DPKGSIZE_CONFIG`` pointing at a missing file means "no config";
    the walk-up is not attempted in that case.
    """
    if env_path := os.environ.get(CONFIG_ENV_VAR):
        explicit = Path(env_path)
        return explicit if explicit.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_config(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML.

    Raises:
        click.ClickException: The file is not valid TOML.
    """
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc
