"""``slck messages`` - send, edit, delete, read and react to messages."""

from typing import IO

import click

from slack_chat_api import output
from slack_chat_api.commands import common
from slack_chat_api.errors import ValidationError
from slack_chat_api.models import Message
from slack_chat_api.validate import (
    normalize_emoji,
    require_timestamp,
    validate_channel_id,
    validate_limit,
)


def _print_message_list(messages: list[Message], empty: str) -> None:
    if common.wants_json():
        output.print_records(messages)
        return
    if not messages:
        output.print_line(empty)
        return
    fmt = common.output_format()
    if fmt == output.TABLE:
        rows = [
            [output.format_ts(m.ts), m.user or "bot", output.truncate(m.text, 60), m.ts]
            for m in messages
        ]
        output.print_table(["Time", "User", "Text", "TS"], rows)
        return
    output.print_messages(messages)


@click.group()
def messages() -> None:
    """Send and manage messages."""


@messages.command("send")
@click.argument("channel")
@click.argument("text", required=False, default="")
@click.option("--thread", "thread_ts", default=None, help="Reply in thread (message timestamp or URL).")
@click.option("--blocks", "blocks_json", default=None, help="Inline Block Kit JSON array.")
@click.option("--blocks-file", type=click.File("r"), default=None, help="Read Block Kit JSON from a file.")
@click.option("--blocks-stdin", is_flag=True, default=False, help="Read Block Kit JSON from stdin.")
@click.option("--simple", is_flag=True, default=False, help="Send plain text without block formatting.")
@click.option("--no-unfurl", is_flag=True, default=False, help="Disable link previews.")
def send(
    channel: str,
    text: str,
    thread_ts: str | None,
    blocks_json: str | None,
    blocks_file: IO | None,
    blocks_stdin: bool,
    simple: bool,
    no_unfurl: bool,
) -> None:
    """Send a message to CHANNEL. Use "-" as TEXT to read it from stdin.

    Messages are sent as a Block Kit section by default; --simple sends
    plain text. TEXT is optional when blocks are provided.
    """
    validate_channel_id(channel)
    if thread_ts:
        thread_ts = require_timestamp(thread_ts)

    sources = [blocks_json is not None, blocks_file is not None, blocks_stdin]
    if sum(sources) > 1:
        raise ValidationError("only one of --blocks, --blocks-file, or --blocks-stdin can be specified")

    if text == "-":
        if blocks_stdin:
            raise ValidationError(
                "cannot use '-' for text and --blocks-stdin together; stdin can only be used for one"
            )
        text = common.read_stdin()
    text = common.unescape_shell(text)

    if blocks_json is not None:
        blocks_source = blocks_json
    elif blocks_file is not None:
        blocks_source = blocks_file.read()
    elif blocks_stdin:
        blocks_source = common.read_stdin()
    else:
        blocks_source = ""

    if not text and not blocks_source:
        raise ValidationError(
            "message text cannot be empty (or provide blocks via --blocks, "
            "--blocks-file, or --blocks-stdin)"
        )

    blocks = None
    if blocks_source:
        blocks = common.parse_blocks(blocks_source)
    elif not simple:
        blocks = common.default_blocks(text)

    message = common.get_client().send_message(
        channel, text, thread_ts=thread_ts, blocks=blocks, unfurl=not no_unfurl
    )

    if common.wants_json():
        output.print_json(message.to_dict())
        return
    output.print_success(f"Message sent (ts: {message.ts})")


@messages.command("update")
@click.argument("channel")
@click.argument("ts")
@click.argument("text")
@click.option("--blocks", "blocks_json", default=None, help="Block Kit JSON array (replaces default formatting).")
@click.option("--simple", is_flag=True, default=False, help="Update as plain text without block formatting.")
@click.option("--no-unfurl", is_flag=True, default=False, help="Disable link previews.")
def update(
    channel: str, ts: str, text: str, blocks_json: str | None, simple: bool, no_unfurl: bool
) -> None:
    """Replace the text of an existing message."""
    validate_channel_id(channel)
    ts = require_timestamp(ts)
    text = common.unescape_shell(text)

    if blocks_json is not None:
        blocks = common.parse_blocks(blocks_json)
    elif not simple and text:
        blocks = common.default_blocks(text)
    else:
        blocks = None

    common.get_client().update_message(channel, ts, text, blocks=blocks, unfurl=not no_unfurl)
    output.print_success("Message updated")


@messages.command("delete")
@click.argument("channel")
@click.argument("ts")
@click.option("-f", "--force", is_flag=True, default=False, help="Skip confirmation prompt.")
def delete(channel: str, ts: str, force: bool) -> None:
    """Delete a message."""
    validate_channel_id(channel)
    ts = require_timestamp(ts)
    if not force:
        click.echo(f"About to delete message {ts} in channel {channel}")
    if not common.confirm("Are you sure?", force):
        click.echo("Cancelled.")
        return
    common.get_client().delete_message(channel, ts)
    output.print_success("Message deleted")


@messages.command("history")
@click.argument("channel")
@click.option("--limit", default=20, show_default=True, help="Number of messages to show.")
@click.option("--oldest", default=None, help="Only messages after this timestamp.")
@click.option("--latest", default=None, help="Only messages before this timestamp.")
def history(channel: str, limit: int, oldest: str | None, latest: str | None) -> None:
    """Read recent messages from a channel, oldest first."""
    validate_channel_id(channel)
    validate_limit(limit)
    if oldest:
        oldest = require_timestamp(oldest)
    if latest:
        latest = require_timestamp(latest)

    result = common.get_client().channel_history(channel, limit=limit, oldest=oldest, latest=latest)
    # Messages come newest-first; reverse for chronological display
    if not common.wants_json():
        result = list(reversed(result))
    _print_message_list(result, "No messages found")


@messages.command("thread")
@click.argument("channel")
@click.argument("ts")
@click.option("--limit", default=100, show_default=True, help="Number of replies to show.")
def thread(channel: str, ts: str, limit: int) -> None:
    """Read the replies in a thread."""
    validate_channel_id(channel)
    validate_limit(limit)
    ts = require_timestamp(ts)
    replies = common.get_client().thread_replies(channel, ts, limit=limit)
    _print_message_list(replies, "No replies found")


@messages.command("react")
@click.argument("channel")
@click.argument("ts")
@click.argument("emoji")
def react(channel: str, ts: str, emoji: str) -> None:
    """Add an emoji reaction to a message."""
    validate_channel_id(channel)
    ts = require_timestamp(ts)
    emoji = normalize_emoji(emoji)
    common.get_client().add_reaction(channel, ts, emoji)
    output.print_success(f"Added :{emoji}: reaction")


@messages.command("unreact")
@click.argument("channel")
@click.argument("ts")
@click.argument("emoji")
def unreact(channel: str, ts: str, emoji: str) -> None:
    """Remove an emoji reaction from a message."""
    validate_channel_id(channel)
    ts = require_timestamp(ts)
    emoji = normalize_emoji(emoji)
    common.get_client().remove_reaction(channel, ts, emoji)
    output.print_success(f"Removed :{emoji}: reaction")
