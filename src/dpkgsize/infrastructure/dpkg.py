"""Thin ``dpkg-query`` wrapper — the package lister and the status query.

Both calls block until the subprocess exits and return its stdout split
into lines. Nothing here interprets stanzas; parsing lives in
:mod:`dpkgsize.domain.records`.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from typing import Protocol

logger = logging.getLogger(__name__)

# One "<status-abbrev>\t<name>" line per known package, e.g. "ii \tbash".
_LIST_FORMAT = "${db:Status-Abbrev}\t${binary:Package}\n"
_INSTALLED_PREFIX = "ii"


class PackageQueryError(Exception):
    """The status query command could not be run at all."""


class PackageSource(Protocol):
    """What the inventory pipeline needs from the package manager."""

    def list_installed(self) -> list[str]: ...

    def status(self, names: Sequence[str]) -> list[str]: ...


class DpkgQuery:
    """:class:`PackageSource` backed by the ``dpkg-query`` executable."""

    def __init__(self, executable: str = "dpkg-query") -> None:
        self._executable = executable

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run dpkg-query without raising on a non-zero exit code."""
        return subprocess.run(
            [self._executable, *args],
            capture_output=True,
            text=True,
            check=False,
        )

    def list_installed(self) -> list[str]:
        """Names of installed packages, in dpkg's order.

        A missing executable or failing listing is logged and yields an
        empty list; an empty inventory is a valid result.
        """
        try:
            proc = self._run("--show", f"--showformat={_LIST_FORMAT}")
        except OSError as exc:
            logger.warning("Package listing failed: %s", exc)
            return []
        if proc.returncode != 0:
            logger.warning(
                "Package listing exited with %d: %s", proc.returncode, proc.stderr.strip()
            )

        names: list[str] = []
        for line in proc.stdout.splitlines():
            status, _, name = line.partition("\t")
            name = name.strip()
            if status.startswith(_INSTALLED_PREFIX) and name:
                names.append(name)
        return names

    def status(self, names: Sequence[str]) -> list[str]:
        """Raw ``dpkg-query --status`` output for *names*.

        dpkg-query exits non-zero when some names are unknown but still
        prints the stanzas it found; those are returned as-is.

        Raises:
            PackageQueryError: The executable cannot be started.
        """
        if not names:
            return []
        try:
            proc = self._run("--status", *names)
        except OSError as exc:
            msg = f"Cannot run {self._executable}: {exc}"
            raise PackageQueryError(msg) from exc
        if proc.returncode != 0:
            logger.debug(
                "%s --status exited with %d: %s",
                self._executable,
                proc.returncode,
                proc.stderr.strip(),
            )
        return proc.stdout.splitlines()
