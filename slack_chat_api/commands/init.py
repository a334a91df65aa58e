"""``slck init`` - interactive first-run setup."""

import click

from slack_chat_api import credentials, output
from slack_chat_api.commands import common
from slack_chat_api.errors import SlackCliError, ValidationError, wrap_error

EXPECTED_PREFIX = {credentials.BOT: "xoxb-", credentials.USER: "xoxp-"}


def _prompt_token(label: str) -> str:
    return click.prompt(label, default="", hide_input=True, show_default=False).strip()


def _configure(kind: str, token: str, verify: bool) -> None:
    detected = credentials.detect_kind(token)
    if detected != kind:
        raise ValidationError(
            f"expected {kind} token ({EXPECTED_PREFIX[kind]}*), got {detected} token"
        )

    if verify:
        output.print_line("")
        output.print_line("Testing connection...")
        try:
            identity = common.client_for_token(token).auth_test()
        except SlackCliError as exc:
            raise wrap_error(f"{kind} token verification failed", exc) from exc
        output.print_success(f"  {kind.capitalize()} token valid")
        output.print_line(f"  Connected to workspace: {identity.team}")
        output.print_line(f"  User: {identity.user}")
        if identity.bot_id:
            output.print_line(f"  Bot ID: {identity.bot_id}")

    credentials.set_token(kind, token)
    output.print_line("")
    output.print_success(f"{kind.capitalize()} token saved.")


@click.command()
@click.option("--bot-token", default=None, help="Bot token (xoxb-*) for non-interactive setup.")
@click.option("--user-token", default=None, help="User token (xoxp-*) for non-interactive setup.")
@click.option("--no-verify", is_flag=True, default=False, help="Skip token verification.")
def init(bot_token: str | None, user_token: str | None, no_verify: bool) -> None:
    """Set up slck with a bot token and, optionally, a user token."""
    output.print_line("Slack CLI Setup", "bold")
    output.print_line("")
    interactive = bot_token is None and user_token is None

    if credentials.has_token(credentials.BOT) or credentials.has_token(credentials.USER):
        output.print_line("Existing configuration detected.")
        if not click.confirm("Overwrite existing configuration?", default=False):
            output.print_line("Setup cancelled.")
            return
        output.print_line("")

    output.print_line("This CLI supports both bot tokens (xoxb-*) and user tokens (xoxp-*).")
    output.print_line("Bot tokens are recommended for most use cases.")
    output.print_line("")

    if interactive:
        bot_token = _prompt_token("Bot Token (xoxb-...)")
    if bot_token:
        _configure(credentials.BOT, bot_token, verify=not no_verify)

    if interactive:
        output.print_line("")
        if click.confirm("Would you like to add a user token as well? (needed for search)", default=False):
            user_token = _prompt_token("User Token (xoxp-...)")
    if user_token:
        _configure(credentials.USER, user_token, verify=not no_verify)

    if not bot_token and not user_token:
        output.print_line("No tokens provided. Setup cancelled.")
        return

    output.print_line("")
    output.print_line("Configuration saved. Try it out:")
    if bot_token:
        output.print_line("  slck channels list")
        output.print_line("  slck users list")
    if user_token:
        output.print_line('  slck search messages "hello"')
