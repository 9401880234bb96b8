"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO); the caller
gets the rendered text back from :func:`render_result`.

Renderers are dispatched by ``result.op``. Unknown ops fall through to a
generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from dpkgsize.output.console import create_console, get_output, size_style

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from dpkgsize.services.result import ServiceResult

    _Renderer = Callable[..., None]


QUIET_REPORT_HEADER = "Package OwnSize Percent SizeWithDeps Percent:"


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op)
        if renderer is None:
            _status_line(console, result)
        else:
            renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal, script-friendly output for ``--quiet`` mode.

    The report becomes a ``Package OwnSize Percent SizeWithDeps Percent:``
    header followed by one ``name own own% deps deps%`` line per package.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if result.op == "report" and items is not None:
        rows = [
            f"{item['name']} {item['own_size']} {item['own_percent']:.2f}% "
            f"{item['transitive_size']} {item['transitive_percent']:.2f}%"
            for item in items
        ]
        return "\n".join([QUIET_REPORT_HEADER, *rows])
    if result.op == "unresolved" and items is not None:
        return "\n".join(f"{item['package']} {item['dependency']}" for item in items)
    if items is not None:
        return "\n".join(str(item["name"]) for item in items if "name" in item)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def format_kib(size: int) -> str:
    """Human-readable size for a KiB count (dpkg's Installed-Size unit)."""
    if size < 1024:
        return f"{size} KiB"
    mib = size / 1024
    if mib < 1024:
        return f"{mib:.1f} MiB"
    return f"{mib / 1024:.1f} GiB"


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="pkg.ok")
    op = Text(f"  {result.op}", style="pkg.op")
    console.print(label, op)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print result metadata; step timings are drawn as an indented tree."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "timings":
            _render_timings(console, value, depth=1)
        else:
            console.print(Text(f"    {key}: {value}"))


def _render_timings(console: Console, node: dict[str, Any], depth: int) -> None:
    ms = float(node.get("ms", 0.0))
    style = "bold red" if ms > 1000 else "yellow" if ms > 100 else "dim"
    line = Text("    " * depth)
    line.append(f"{ms:>8.2f}ms", style=style)
    line.append(f"  {node.get('name', '?')}")
    counts = node.get("counts")
    if counts:
        line.append("  " + " ".join(f"{k}={v}" for k, v in counts.items()), style="dim")
    console.print(line)

    for child in node.get("steps", []):
        _render_timings(console, child, depth + 1)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="pkg.error"),
        Text(f"  {result.op}", style="pkg.op"),
        Text(" — "),
        Text(msg),
    )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Inventory renderers ───────────────────────────────────────────────


def _render_report(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the size report as a table, smallest package first."""
    d = result.data
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Package", style="pkg.name", no_wrap=True)
    table.add_column("Own", style="pkg.size", justify="right")
    table.add_column("Own %", style="pkg.percent", justify="right")
    table.add_column("With deps", style="pkg.size", justify="right")
    table.add_column("With deps %", style="pkg.percent", justify="right")
    if verbose:
        table.add_column("Deps", justify="right")

    for item in d.get("items", []):
        row: list[str | Text] = [
            str(item["name"]),
            Text(str(item["own_size"]), style=size_style(item["own_size"])),
            f"{item['own_percent']:.2f}%",
            Text(str(item["transitive_size"]), style=size_style(item["transitive_size"])),
            f"{item['transitive_percent']:.2f}%",
        ]
        if verbose:
            row.append(str(item.get("dependency_count", "")))
        table.add_row(*row)

    console.print(table)
    total = int(d.get("total_size", 0))
    console.print(
        f"\n{d.get('count', 0)} of {d.get('total_packages', 0)} packages, "
        f"{total} KiB ({format_kib(total)}) installed"
    )
    if verbose:
        _render_meta(console, result)


def _render_show(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render one package's breakdown: summary panel plus reachable packages."""
    d = result.data
    lines = [
        f"own: {d['own_size']} KiB ({format_kib(d['own_size'])}, {d['own_percent']:.2f}%)",
        f"with deps: {d['transitive_size']} KiB "
        f"({format_kib(d['transitive_size'])}, {d['transitive_percent']:.2f}%)",
    ]
    if d.get("depends"):
        lines.append(f"depends: {', '.join(d['depends'])}")
    if d.get("unresolved"):
        lines.append(f"unresolved: {', '.join(d['unresolved'])}")
    console.print(Panel("\n".join(lines), title=str(d["name"]), border_style="dim", expand=False))

    items = d.get("items", [])
    if items:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Dependency", style="pkg.name", no_wrap=True)
        table.add_column("Own", style="pkg.size", justify="right")
        table.add_column("Own %", style="pkg.percent", justify="right")
        for item in items:
            own = int(item["own_size"])
            table.add_row(
                str(item["name"]), Text(str(own), style=size_style(own)), f"{item['own_percent']:.2f}%"
            )
        console.print(table)
    console.print(f"\n{d.get('count', len(items))} packages pulled in")
    if verbose:
        _render_meta(console, result)


def _render_unresolved(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        _status_line(console, result)
        console.print("  every dependency resolved")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Package", style="pkg.name", no_wrap=True)
    table.add_column("Missing dependency", style="pkg.warning")
    for item in items:
        table.add_row(str(item["package"]), str(item["dependency"]))
    console.print(table)
    console.print(f"\n{len(items)} unresolved")
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, _Renderer] = {
    "report": _render_report,
    "show": _render_show,
    "unresolved": _render_unresolved,
}
