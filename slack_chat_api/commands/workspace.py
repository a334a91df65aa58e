"""``slck workspace`` and ``slck whoami``."""

import click

from slack_chat_api import output
from slack_chat_api.commands import common


@click.group()
def workspace() -> None:
    """Workspace information."""


@workspace.command("info")
def info() -> None:
    """Show the workspace name and domain."""
    team = common.get_client().team_info()

    if common.wants_json():
        output.print_json(team.to_dict())
        return
    output.print_fields(
        [
            ("ID", team.id),
            ("Name", team.name),
            ("Domain", f"{team.domain}.slack.com" if team.domain else ""),
        ]
    )


@click.command()
def whoami() -> None:
    """Show the identity behind the bot token."""
    identity = common.get_client().auth_test()

    if common.wants_json():
        output.print_json(identity.to_dict())
        return
    output.print_fields(
        [
            ("User", identity.user),
            ("User ID", identity.user_id),
            ("Workspace", identity.team),
            ("Team ID", identity.team_id),
            ("Bot ID", identity.bot_id),
        ]
    )
