"""Rendering helpers shared by the command handlers.

Three formats: ``text`` (plain console lines), ``table`` (rich tables) and
``json`` (indented JSON of the record dicts, uncoloured so it can be piped).
"""

import json
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from slack_chat_api.models import Message

TEXT = "text"
JSON = "json"
TABLE = "table"
FORMATS = (TEXT, JSON, TABLE)

console = Console(soft_wrap=True)


def configure(no_color: bool = False) -> None:
    """Rebuild the shared console, optionally without colour."""
    global console
    console = Console(soft_wrap=True, no_color=no_color)


def print_json(data) -> None:
    """Write ``data`` as indented JSON to stdout."""
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def print_records(records: Iterable) -> None:
    """Print records as a JSON array."""
    print_json([record.to_dict() for record in records])


def print_line(message: str, style: str | None = None) -> None:
    """Print literal text (no markup parsing) with an optional style."""
    console.print(Text(message, style=style or ""))


def print_success(message: str) -> None:
    """Print a confirmation line in green."""
    print_line(message, "green")


def print_fields(fields: Sequence[tuple[str, object]]) -> None:
    """Print aligned ``Label: value`` lines, skipping empty values."""
    width = max(len(label) for label, _ in fields) + 1
    for label, value in fields:
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        line = Text(f"{label + ':':<{width}} ", style="bold")
        line.append(str(value))
        console.print(line)


def print_table(
    columns: Sequence[str],
    rows: Iterable[Sequence[str]],
    title: str | None = None,
) -> None:
    """Render a rich table; the first column is highlighted."""
    table = Table(title=title)
    for i, column in enumerate(columns):
        table.add_column(column, style="cyan" if i == 0 else None)
    for row in rows:
        table.add_row(*(Text(str(cell)) for cell in row))
    console.print(table)


def print_rows(
    fmt: str,
    columns: Sequence[str],
    rows: list[Sequence[str]],
    title: str | None = None,
) -> None:
    """Print ``rows`` as a rich table, or as aligned plain columns for text."""
    if fmt == TABLE:
        print_table(columns, rows, title=title)
        return
    widths = [
        max([len(column), *(len(str(row[i])) for row in rows)])
        for i, column in enumerate(columns)
    ]
    header = "  ".join(f"{column.upper():<{widths[i]}}" for i, column in enumerate(columns))
    console.print(Text(header.rstrip(), style="bold"))
    for row in rows:
        cells = (f"{str(cell):<{widths[i]}}" for i, cell in enumerate(row))
        console.print(Text("  ".join(cells).rstrip()))


def print_messages(messages: Iterable[Message]) -> None:
    """Render Slack messages as ``[time] user: text`` lines."""
    for msg in messages:
        line = Text()
        line.append(f"[{format_ts(msg.ts)}] ", style="dim")
        line.append(f"{msg.user or 'bot'}: ", style="bold")
        line.append(msg.text)
        # Indicate threaded messages
        if msg.thread_ts and msg.reply_count:
            line.append(f" [{msg.reply_count} replies]", style="yellow")
        console.print(line)


# -- Formatting ---------------------------------------------------------------


def format_ts(ts: str) -> str:
    """Convert a Slack timestamp to a human-readable datetime string."""
    try:
        epoch = float(ts.split(".")[0])
        dt = datetime.fromtimestamp(epoch, tz=timezone.utc)
        return dt.strftime("%Y-%m-%d %H:%M")
    except (ValueError, IndexError, OverflowError):
        return ts


def format_unix(seconds: int) -> str:
    """Format epoch seconds in UTC; 0 renders as blank."""
    if not seconds:
        return ""
    return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def truncate(text: str, max_len: int) -> str:
    """Flatten newlines and cut ``text`` to ``max_len`` characters."""
    text = text.replace("\r", "").replace("\n", " ")
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
