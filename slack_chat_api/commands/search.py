"""``slck search`` - full-text search over messages and files.

Search endpoints only accept user tokens (xoxp-).
"""

import click

from slack_chat_api import credentials, output
from slack_chat_api.commands import common
from slack_chat_api.models import FileGroup, MessageGroup, SearchResult
from slack_chat_api.query import (
    SCOPE_MODIFIERS,
    QueryOptions,
    build_query,
    validate_search_options,
)


def search_options(files: bool = False):
    """Attach the paging, ordering and filter options shared by every search command."""

    def decorator(func):
        options = [
            click.option("-c", "--count", default=20, show_default=True, help="Results per page (max 100)."),
            click.option("-p", "--page", default=1, show_default=True, help="Page number (max 100)."),
            click.option("-s", "--sort", default="score", show_default=True, help="Sort by: score or timestamp."),
            click.option("--sort-dir", default="desc", show_default=True, help="Sort direction: asc or desc."),
            click.option("--highlight", is_flag=True, default=False, help="Highlight matching terms."),
            click.option("--include-bots", is_flag=True, default=False, help="Include results from bots."),
            click.option("--scope", default="", help=f"Search scope: {', '.join(SCOPE_MODIFIERS)}."),
            click.option("--in", "in_channel", default="", help='Filter by channel (e.g. "#general").'),
            click.option("--from", "from_user", default="", help='Filter by user (e.g. "@alice").'),
            click.option("--after", default="", help="Only results after this date (YYYY-MM-DD)."),
            click.option("--before", default="", help="Only results before this date (YYYY-MM-DD)."),
            click.option("--has-link", is_flag=True, default=False, help="Only results containing links."),
            click.option("--has-reaction", is_flag=True, default=False, help="Only results with reactions."),
        ]
        if files:
            options += [
                click.option("--type", "file_type", default="", help="File type (pdf, doc, image, ...)."),
                click.option("--has-pin", is_flag=True, default=False, help="Only pinned files."),
            ]
        for option in reversed(options):
            func = option(func)
        return func

    return decorator


def _prepare(query: str, params: dict) -> str:
    validate_search_options(params["count"], params["page"], params["sort"], params["sort_dir"])
    options = QueryOptions(
        scope=params["scope"],
        in_channel=params["in_channel"],
        from_user=params["from_user"],
        after=params["after"],
        before=params["before"],
        has_link=params["has_link"],
        has_reaction=params["has_reaction"],
        file_type=params.get("file_type", ""),
        has_pin=params.get("has_pin", False),
    )
    return build_query(query, options)


def _run(method: str, query: str, params: dict) -> SearchResult:
    final_query = _prepare(query, params)
    client = common.get_client(credentials.USER)
    search = getattr(client, method)
    return search(
        final_query,
        count=params["count"],
        page=params["page"],
        sort=params["sort"],
        sort_dir=params["sort_dir"],
        highlight=params["highlight"],
        include_bots=params["include_bots"],
    )


def _print_message_group(group: MessageGroup) -> None:
    rows = [
        [m.channel.name, m.username, output.format_ts(m.ts), output.truncate(m.text, 60)]
        for m in group.matches
    ]
    output.print_rows(common.output_format(), ["Channel", "User", "Timestamp", "Text"], rows)
    paging = group.paging
    output.print_line(
        f"Page {paging.page} of {paging.pages} (showing {len(group.matches)} of {paging.total} results)",
        "dim",
    )


def _print_file_group(group: FileGroup) -> None:
    rows = [
        [f.name, f.title, f.filetype, output.format_unix(f.created)]
        for f in group.matches
    ]
    output.print_rows(common.output_format(), ["Name", "Title", "Type", "Created"], rows)
    paging = group.paging
    output.print_line(
        f"Page {paging.page} of {paging.pages} (showing {len(group.matches)} of {paging.total} results)",
        "dim",
    )


@click.group()
def search() -> None:
    """Search messages and files (requires a user token)."""


@search.command("messages")
@click.argument("query")
@search_options()
def search_messages(query: str, **params) -> None:
    """Search messages."""
    result = _run("search_messages", query, params)

    if common.wants_json():
        output.print_json(result.to_dict())
        return
    if result.messages is None or not result.messages.matches:
        output.print_line(f'No messages found for "{query}"')
        return
    output.print_line(f'Found {result.messages.total} messages matching "{query}"')
    _print_message_group(result.messages)


@search.command("files")
@click.argument("query")
@search_options(files=True)
def search_files(query: str, **params) -> None:
    """Search files."""
    result = _run("search_files", query, params)

    if common.wants_json():
        output.print_json(result.to_dict())
        return
    if result.files is None or not result.files.matches:
        output.print_line(f'No files found for "{query}"')
        return
    output.print_line(f'Found {result.files.total} files matching "{query}"')
    _print_file_group(result.files)


@search.command("all")
@click.argument("query")
@search_options()
def search_all(query: str, **params) -> None:
    """Search messages and files together."""
    result = _run("search_all", query, params)

    if common.wants_json():
        output.print_json(result.to_dict())
        return
    has_messages = result.messages is not None and bool(result.messages.matches)
    has_files = result.files is not None and bool(result.files.matches)
    if not has_messages and not has_files:
        output.print_line(f'No results found for "{query}"')
        return
    if has_messages:
        output.print_line(f"=== Messages ({result.messages.total} total) ===", "bold")
        _print_message_group(result.messages)
    if has_files:
        output.print_line(f"=== Files ({result.files.total} total) ===", "bold")
        _print_file_group(result.files)
