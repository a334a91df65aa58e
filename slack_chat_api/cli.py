"""slck - operate a Slack workspace from the terminal.

Bot tokens (xoxb-) drive channels, users, messages and workspace commands;
a user token (xoxp-) is needed for search.
"""

import logging

import click

from slack_chat_api import __version__, config, output
from slack_chat_api.commands.auth import auth
from slack_chat_api.commands.channels import channels
from slack_chat_api.commands.config import config_group
from slack_chat_api.commands.init import init
from slack_chat_api.commands.messages import messages
from slack_chat_api.commands.search import search
from slack_chat_api.commands.users import users
from slack_chat_api.commands.workspace import whoami, workspace

logger = logging.getLogger(__name__)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name=config.PROG_NAME)
@click.option(
    "-o",
    "--output",
    "output_format",
    type=click.Choice(output.FORMATS),
    default=output.TEXT,
    envvar="SLCK_OUTPUT",
    show_default=True,
    help="Output format.",
)
@click.option("--no-color", is_flag=True, default=False, help="Disable coloured output.")
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, output_format: str, no_color: bool, debug: bool) -> None:
    """slck - operate a Slack workspace from your terminal."""
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    output.configure(no_color=no_color)
    ctx.ensure_object(dict)
    ctx.obj["output"] = output_format
    logger.debug("Output format: %s", output_format)


cli.add_command(channels)
cli.add_command(users)
cli.add_command(messages)
cli.add_command(search)
cli.add_command(workspace)
cli.add_command(whoami)
cli.add_command(config_group)
cli.add_command(init)
cli.add_command(auth)


def main() -> None:
    """Console script entry point."""
    cli(prog_name=config.PROG_NAME)


if __name__ == "__main__":
    main()
