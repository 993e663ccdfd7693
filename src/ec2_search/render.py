from __future__ import annotations

import re
from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from .aws_api import TABLE_HEADERS

NO_MATCHES_MESSAGE = "no matching instances found"
MAX_TABLE_WIDTH = 10_000

_HEADER_SEPARATORS = re.compile(r"_|(?<=[^\d\s])\.|\.(?=[^\d\s])")


def make_console(*, stderr: bool = False) -> Console:
    return Console(stderr=stderr, highlight=False, emoji=False, markup=False)


def render_message(message: str, console: Console) -> None:
    _print_plain(console, message)


def render_ips(
    ips: Sequence[str],
    console: Console,
    *,
    new_line: bool = False,
    delimiter: str = " ",
) -> None:
    if new_line:
        for ip in ips:
            _print_plain(console, ip)
        return
    _print_plain(console, delimiter.join(ips))


def render_table(
    rows: Sequence[Sequence[str]],
    console: Console,
    headers: Sequence[str] = TABLE_HEADERS,
) -> None:
    table = Table(box=box.ASCII, show_header=True, header_style="bold", show_edge=True)
    for header in headers:
        table.add_column(format_header(header), no_wrap=True)
    for row in rows:
        table.add_row(*row)
    # Widen past the terminal so columns are never squeezed.
    natural_width = console.measure(table, options=console.options.update_width(MAX_TABLE_WIDTH)).maximum
    original_width = console.width
    console.width = max(original_width, natural_width)
    try:
        console.print(table)
    finally:
        console.width = original_width


def format_header(name: str) -> str:
    """Normalize a header cell: separators become spaces, text is upper-cased."""
    formatted = _HEADER_SEPARATORS.sub(" ", name).strip()
    if not formatted and name:
        return " "
    return formatted.upper()


def _print_plain(console: Console, text: str) -> None:
    print(text, file=console.file)
