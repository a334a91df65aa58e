"""Helpers shared by the command modules."""

import json
import sys

import click

from slack_chat_api import config, credentials, output
from slack_chat_api.client import SlackClient
from slack_chat_api.errors import ValidationError


def get_client(kind: str = credentials.BOT) -> SlackClient:
    """Build the API client for this invocation, bound to a token kind."""
    return SlackClient.for_kind(kind)


def client_for_token(token: str) -> SlackClient:
    """Build a client for a token that is not (yet) stored."""
    return SlackClient(config.DEFAULT_BASE_URL, token)


def output_format() -> str:
    """Return the format chosen with the root ``-o/--output`` option."""
    ctx = click.get_current_context()
    obj = ctx.find_object(dict) or {}
    return obj.get("output", output.TEXT)


def wants_json() -> bool:
    """True when the current command should print JSON."""
    return output_format() == output.JSON


def confirm(prompt: str, force: bool = False) -> bool:
    """Ask for a y/N confirmation unless ``force`` is set."""
    if force:
        return True
    return click.confirm(prompt, default=False)


def unescape_shell(text: str) -> str:
    """Undo the backslash some shells put before ``!`` in quoted arguments."""
    return text.replace("\\!", "!")


def read_stdin() -> str:
    """Read all of stdin, dropping trailing newlines."""
    return sys.stdin.read().rstrip("\n")


def default_blocks(text: str) -> list[dict]:
    """Wrap ``text`` in a single mrkdwn section block."""
    return [{"type": "section", "text": {"type": "mrkdwn", "text": text}}]


def parse_blocks(source: str) -> list:
    """Decode a Block Kit JSON array."""
    try:
        blocks = json.loads(source)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"invalid blocks JSON: {exc}") from exc
    if not isinstance(blocks, list):
        raise ValidationError("invalid blocks JSON: expected an array of blocks")
    return blocks
