"""``slck auth`` - OAuth login, logout and status."""

import logging

import click

from slack_chat_api import config, credentials, oauth, output
from slack_chat_api.commands import common
from slack_chat_api.errors import SlackCliError

logger = logging.getLogger(__name__)


def _show_authorize_url(url: str) -> None:
    output.print_line("Opening browser to authorize...")
    output.print_line("If browser doesn't open, visit:")
    output.print_line(url)
    output.print_line("")
    output.print_line("Waiting for authorization...", "dim")


@click.group()
def auth() -> None:
    """Authenticate with Slack."""


@auth.command()
@click.option("--client-id", envvar="SLACK_CLIENT_ID", default=None, help="Slack app Client ID.")
@click.option(
    "--client-secret", envvar="SLACK_CLIENT_SECRET", default=None, help="Slack app Client Secret."
)
@click.option(
    "--port",
    default=config.OAUTH_DEFAULT_PORT,
    show_default=True,
    type=click.IntRange(1, 65535),
    help="Local port for the OAuth callback.",
)
def login(client_id: str | None, client_secret: str | None, port: int) -> None:
    """Log in through Slack OAuth (opens a browser).

    The Slack app must list http://localhost:<port>/callback as a redirect
    URL. The resulting bot token is stored like 'config set-token' would.
    """
    if not client_id:
        client_id = click.prompt("Enter Slack Client ID").strip()
    if not client_secret:
        client_secret = click.prompt("Enter Slack Client Secret", hide_input=True).strip()

    oauth.login(client_id, client_secret, port, on_authorize_url=_show_authorize_url)
    output.print_success("Authentication successful! Bot token saved.")


@auth.command()
def logout() -> None:
    """Remove the stored bot token."""
    if credentials.delete_token(credentials.BOT):
        output.print_success("Bot token removed")
    else:
        output.print_line("No bot token was stored")


@auth.command()
def status() -> None:
    """Show whether a bot token is configured and for which workspace."""
    source = credentials.token_source(credentials.BOT)
    if not source:
        if common.wants_json():
            output.print_json({"authenticated": False})
            return
        output.print_line("Not authenticated")
        output.print_line("")
        output.print_line("To authenticate:")
        output.print_line("  slck auth login          # OAuth (recommended)")
        output.print_line("  slck config set-token    # Manual token")
        return

    masked = credentials.mask_token(credentials.get_token(credentials.BOT))
    team = None
    try:
        team = common.get_client().team_info()
    except SlackCliError as exc:
        logger.debug("Could not fetch workspace info: %s", exc.format_message())

    if common.wants_json():
        data = {"authenticated": True, "token": masked, "source": source}
        if team is not None:
            data["workspace"] = team.to_dict()
        output.print_json(data)
        return
    output.print_line(f"Authenticated: {masked} (from {source})")
    if team is not None:
        output.print_line(f"Workspace: {team.name} ({team.domain}.slack.com)")
