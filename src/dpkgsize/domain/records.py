"""Package records — parse ``dpkg-query --status`` stanzas.

Pure functions, no infrastructure dependencies. The batch driver feeds the
raw output of one status query through :func:`parse_status` and merges the
returned records into the catalog.

INVARIANT: Every record carries an installed size. A stanza without one
aborts the run instead of being reported as zero.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

PACKAGE_FIELD = "Package: "
INSTALLED_SIZE_FIELD = "Installed-Size: "
REPLACES_FIELD = "Replaces: "
PROVIDES_FIELD = "Provides: "
DEPENDS_FIELD = "Depends: "

_LIST_SEPARATOR = ", "
# "libfoo (>= 1.2)", "libbar:any", "libbaz | libqux" -> cut at first space or colon
_QUALIFIER_PATTERN = re.compile(r"[ :]")


class DataIntegrityError(Exception):
    """A status stanza cannot be turned into a trustworthy record."""


class MissingInstalledSizeError(DataIntegrityError):
    """A stanza closed without an ``Installed-Size:`` line."""

    def __init__(self, package: str) -> None:
        super().__init__(f"Failed to find installed size of package '{package}'")
        self.package = package


@dataclass(frozen=True)
class PackageRecord:
    """One installed package as reported by dpkg."""

    name: str
    installed_size: int  # KiB
    replaces: frozenset[str] = frozenset()
    provides: frozenset[str] = frozenset()
    depends: frozenset[str] = frozenset()


@dataclass
class _Stanza:
    """Mutable accumulator for the stanza currently being read."""

    name: str
    installed_size: int | None = None
    replaces: frozenset[str] = frozenset()
    provides: frozenset[str] = frozenset()
    depends: frozenset[str] = frozenset()

    def close(self) -> PackageRecord:
        if self.installed_size is None:
            raise MissingInstalledSizeError(self.name)
        return PackageRecord(
            name=self.name,
            installed_size=self.installed_size,
            replaces=self.replaces,
            provides=self.provides,
            depends=self.depends,
        )


def bare_name(entry: str) -> str:
    """Strip version constraints, architecture qualifiers and alternatives.

    ``"libc6 (>= 2.34)"`` -> ``"libc6"``, ``"python3:any"`` -> ``"python3"``,
    ``"default-mta | mail-transport-agent"`` -> ``"default-mta"``.
    """
    return _QUALIFIER_PATTERN.split(entry.strip(), maxsplit=1)[0]


def split_names(value: str) -> frozenset[str]:
    """Split a comma-and-space separated field value into a set of bare names.

    Used for ``Depends:``, ``Replaces:`` and ``Provides:`` alike, so that a
    versioned provide such as ``libfoo-abi (= 2)`` is indexed as ``libfoo-abi``.
    """
    names = (bare_name(entry) for entry in value.strip().split(_LIST_SEPARATOR))
    return frozenset(name for name in names if name)


def parse_installed_size(package: str, value: str) -> int:
    """Parse an ``Installed-Size:`` value, rejecting anything but a non-negative int."""
    text = value.strip()
    if not text.isdecimal():
        msg = f"Invalid installed size {text!r} for package '{package}'"
        raise DataIntegrityError(msg)
    return int(text)


def parse_status(lines: Iterable[str]) -> list[PackageRecord]:
    """Parse the output of one ``dpkg-query --status`` call, in stanza order.

    A stanza starts at a ``Package:`` line and ends at the first blank line
    or at end of input. Unrecognized lines, and field lines seen outside a
    stanza, are ignored. Two stanzas may share a name (one per architecture
    on multi-arch hosts); both are returned, in the order dpkg printed them.

    Raises:
        MissingInstalledSizeError: A stanza has no ``Installed-Size:`` line.
        DataIntegrityError: An ``Installed-Size:`` value is not an integer,
            or a ``Package:`` line names nothing.
    """
    records: list[PackageRecord] = []
    current: _Stanza | None = None

    for raw in lines:
        line = raw.rstrip("\r\n")

        if not line.strip():
            if current is not None:
                records.append(current.close())
                current = None
            continue

        if line.startswith(PACKAGE_FIELD):
            if current is not None:
                records.append(current.close())
            name = line[len(PACKAGE_FIELD) :].strip()
            if not name:
                raise DataIntegrityError("Stanza with an empty package name")
            current = _Stanza(name=name)
        elif current is None:
            continue
        elif line.startswith(INSTALLED_SIZE_FIELD):
            current.installed_size = parse_installed_size(
                current.name, line[len(INSTALLED_SIZE_FIELD) :]
            )
        elif line.startswith(REPLACES_FIELD):
            current.replaces = split_names(line[len(REPLACES_FIELD) :])
        elif line.startswith(PROVIDES_FIELD):
            current.provides = split_names(line[len(PROVIDES_FIELD) :])
        elif line.startswith(DEPENDS_FIELD):
            current.depends = split_names(line[len(DEPENDS_FIELD) :])

    if current is not None:
        records.append(current.close())
    return records
