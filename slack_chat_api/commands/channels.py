"""``slck channels`` - list, inspect and administer conversations."""

import logging

import click

from slack_chat_api import output
from slack_chat_api.commands import common
from slack_chat_api.errors import SlackAPIError, WrappedError
from slack_chat_api.validate import validate_channel_id, validate_limit, validate_user_id

logger = logging.getLogger(__name__)

UNARCHIVE_NOTE = (
    "Note: bot tokens usually cannot unarchive channels because a bot cannot "
    "join an archived channel. Retry with a user token (xoxp-) that has channels:write."
)


@click.group()
def channels() -> None:
    """List and manage channels."""


@channels.command("list")
@click.option("--types", default="", help="Channel types (public_channel,private_channel,mpim,im).")
@click.option(
    "--exclude-archived/--include-archived",
    default=True,
    show_default=True,
    help="Skip archived channels.",
)
@click.option("--limit", default=100, show_default=True, help="Maximum channels to return.")
def list_channels(types: str, exclude_archived: bool, limit: int) -> None:
    """List channels in the workspace."""
    validate_limit(limit)
    client = common.get_client()
    result = client.list_channels(types=types, exclude_archived=exclude_archived, limit=limit)

    if common.wants_json():
        output.print_records(result)
        return
    if not result:
        output.print_line("No channels found")
        return
    rows = [[ch.id, ch.name, ch.kind_label, str(ch.num_members)] for ch in result]
    output.print_rows(common.output_format(), ["ID", "Name", "Type", "Members"], rows, title="Channels")


@channels.command("get")
@click.argument("channel_id")
def get_channel(channel_id: str) -> None:
    """Show details for a channel."""
    validate_channel_id(channel_id)
    channel = common.get_client().get_channel(channel_id)

    if common.wants_json():
        output.print_json(channel.to_dict())
        return
    output.print_fields(
        [
            ("ID", channel.id),
            ("Name", channel.name),
            ("Private", channel.is_private),
            ("Archived", channel.is_archived),
            ("Members", channel.num_members),
            ("Topic", channel.topic),
            ("Purpose", channel.purpose),
        ]
    )


@channels.command("create")
@click.argument("name")
@click.option("--private", "is_private", is_flag=True, default=False, help="Create a private channel.")
def create_channel(name: str, is_private: bool) -> None:
    """Create a new channel."""
    channel = common.get_client().create_channel(name, is_private=is_private)

    if common.wants_json():
        output.print_json(channel.to_dict())
        return
    output.print_success(f"Created channel: {channel.name} ({channel.id})")


@channels.command("archive")
@click.argument("channel_id")
@click.option("-f", "--force", is_flag=True, default=False, help="Skip confirmation prompt.")
def archive_channel(channel_id: str, force: bool) -> None:
    """Archive a channel."""
    validate_channel_id(channel_id)
    if not force:
        click.echo(f"About to archive channel: {channel_id}")
    if not common.confirm("Are you sure?", force):
        click.echo("Cancelled.")
        return
    common.get_client().archive_channel(channel_id)
    output.print_success(f"Archived channel: {channel_id}")


@channels.command("unarchive")
@click.argument("channel_id")
def unarchive_channel(channel_id: str) -> None:
    """Unarchive a channel."""
    validate_channel_id(channel_id)
    try:
        common.get_client().unarchive_channel(channel_id)
    except WrappedError as exc:
        cause = exc.unwrap()
        if isinstance(cause, SlackAPIError) and cause.code == "not_in_channel":
            click.echo(UNARCHIVE_NOTE, err=True)
        raise
    output.print_success(f"Unarchived channel: {channel_id}")


@channels.command("set-topic")
@click.argument("channel_id")
@click.argument("topic")
def set_topic(channel_id: str, topic: str) -> None:
    """Set a channel's topic."""
    validate_channel_id(channel_id)
    common.get_client().set_channel_topic(channel_id, topic)
    output.print_success(f"Set topic for channel {channel_id}")


@channels.command("set-purpose")
@click.argument("channel_id")
@click.argument("purpose")
def set_purpose(channel_id: str, purpose: str) -> None:
    """Set a channel's purpose."""
    validate_channel_id(channel_id)
    common.get_client().set_channel_purpose(channel_id, purpose)
    output.print_success(f"Set purpose for channel {channel_id}")


@channels.command("invite")
@click.argument("channel_id")
@click.argument("user_ids", nargs=-1, required=True)
def invite(channel_id: str, user_ids: tuple[str, ...]) -> None:
    """Invite one or more users to a channel."""
    validate_channel_id(channel_id)
    for user_id in user_ids:
        validate_user_id(user_id)
    common.get_client().invite_to_channel(channel_id, list(user_ids))
    logger.debug("Invited %s to %s", ",".join(user_ids), channel_id)
    output.print_success(f"Invited {len(user_ids)} user(s) to channel {channel_id}")
