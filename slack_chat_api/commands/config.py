"""``slck config`` - manage the stored bot and user tokens."""

import click

from slack_chat_api import credentials, output
from slack_chat_api.commands import common
from slack_chat_api.errors import AuthAbsentError, SlackCliError, ValidationError

KIND_LABELS = {credentials.BOT: "Bot", credentials.USER: "User"}


def _storage_description() -> str:
    if credentials.is_secure_storage():
        return "Keychain"
    return str(credentials.credentials_path())


def _warn_insecure_storage() -> None:
    if credentials.is_secure_storage():
        return
    output.print_line(
        f"Warning: your token will be stored in a config file ({credentials.credentials_path()})\n"
        "         with restricted permissions (0600). This is less secure than Keychain storage.",
        "yellow",
    )


@click.group("config")
def config_group() -> None:
    """Manage stored credentials."""


@config_group.command("set-token")
@click.argument("token", required=False)
def set_token(token: str | None) -> None:
    """Store a bot (xoxb-) or user (xoxp-) token.

    The token type is detected from its prefix. When TOKEN is omitted you
    are prompted for it without echo.
    """
    _warn_insecure_storage()
    if not token:
        token = click.prompt("Enter token", hide_input=True, default="", show_default=False)
    token = token.strip()
    if not token:
        raise ValidationError("token cannot be empty")

    kind = credentials.detect_kind(token)
    if kind == "unknown":
        raise ValidationError(
            "unrecognized token format (expected xoxb-* for bot or xoxp-* for user)"
        )
    credentials.set_token(kind, token)

    if credentials.is_secure_storage():
        output.print_success(f"{KIND_LABELS[kind]} token stored securely in Keychain")
    else:
        output.print_success(f"{KIND_LABELS[kind]} token stored in {credentials.credentials_path()}")
    if kind == credentials.USER:
        output.print_line("Note: This token will be used for search commands.")


@config_group.command("delete-token")
@click.option(
    "-t",
    "--type",
    "token_type",
    type=click.Choice(["bot", "user", "all"]),
    default="all",
    show_default=True,
    help="Token type to delete.",
)
@click.option("-f", "--force", is_flag=True, default=False, help="Skip confirmation prompt.")
def delete_token(token_type: str, force: bool) -> None:
    """Delete a stored token."""
    kinds = list(credentials.KINDS) if token_type == "all" else [token_type]
    stored = [kind for kind in kinds if credentials.has_token(kind)]

    if not stored:
        label = "tokens" if token_type == "all" else f"{token_type} token"
        output.print_line(f"No {label} stored to delete.")
        for kind in kinds:
            if credentials.token_source(kind) == credentials.SOURCE_ENV:
                output.print_line(
                    f"Note: {KIND_LABELS[kind]} token is set via the "
                    f"{credentials.ENV_VARS[kind]} environment variable."
                )
        return

    description = " and ".join(kind for kind in stored)
    noun = "tokens" if len(stored) > 1 else "token"
    if not force:
        click.echo(f"About to delete the stored {description} {noun}.")
    if not common.confirm("Are you sure?", force):
        click.echo("Cancelled.")
        return

    for kind in stored:
        source = credentials.get_backend().source
        credentials.delete_token(kind)
        output.print_success(f"{KIND_LABELS[kind]} token deleted from {source}")


@config_group.command("show")
def show() -> None:
    """Show which tokens are configured and where they come from."""
    status = {}
    for kind in credentials.KINDS:
        source = credentials.token_source(kind)
        entry: dict = {"configured": bool(source), "source": source or None}
        if source:
            entry["token"] = credentials.mask_token(credentials.get_token(kind))
        status[kind] = entry

    if common.wants_json():
        output.print_json({"storage": _storage_description(), **status})
        return

    for kind in credentials.KINDS:
        entry = status[kind]
        if entry["configured"]:
            output.print_line(f"{KIND_LABELS[kind]} token: {entry['token']} (from {entry['source']})")
        else:
            output.print_line(f"{KIND_LABELS[kind]} token: Not configured")
    output.print_line(f"Storage: {_storage_description()}", "dim")
    if not any(entry["configured"] for entry in status.values()):
        output.print_line("Run 'slck config set-token' to configure.")


@config_group.command("test")
def verify() -> None:
    """Verify the configured tokens against Slack."""
    output.print_line("Testing Slack authentication...")
    any_success = False

    for kind in credentials.KINDS:
        output.print_line("")
        output.print_line(f"{KIND_LABELS[kind]} Token:", "bold")
        try:
            identity = common.get_client(kind).auth_test()
        except AuthAbsentError as exc:
            output.print_line(f"  Not configured: {exc.format_message()}")
            continue
        except SlackCliError as exc:
            output.print_line(f"  Authentication failed: {exc.format_message()}", "red")
            continue
        any_success = True
        output.print_success("  Authentication successful")
        output.print_line(f"    Workspace: {identity.team}")
        output.print_line(f"    User: {identity.user}")
        if identity.bot_id:
            output.print_line(f"    Bot ID: {identity.bot_id}")

    if not any_success:
        output.print_line("")
        output.print_line("No valid tokens configured. Run 'slck config set-token' to configure.")


@config_group.command("clear")
def clear() -> None:
    """Remove all stored tokens (environment variables are not affected)."""
    cleared = False
    for kind in credentials.KINDS:
        if credentials.has_token(kind):
            credentials.delete_token(kind)
            output.print_success(f"Cleared {kind} token")
            cleared = True
    if not cleared:
        output.print_line("No stored tokens to clear.")

    if any(credentials.token_source(kind) == credentials.SOURCE_ENV for kind in credentials.KINDS):
        output.print_line("")
        output.print_line(
            "Note: Environment variable SLACK_API_TOKEN and/or SLACK_USER_TOKEN will still be used if set."
        )
