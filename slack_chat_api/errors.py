"""Error taxonomy for the CLI.

Every expected failure is a ``click.ClickException`` so click prints a
single ``Error: ...`` line to stderr and exits non-zero without a stack
trace. API failures wrapped with an operation label may carry a one-line
hint, printed on a second line.
"""

import click

ERROR_HINTS: dict[str, str] = {
    "channel_not_found": "Verify the channel ID is correct. Use 'slck channels list' to find channel IDs.",
    "not_in_channel": "The bot must be invited to the channel. Use /invite @yourbot in Slack.",
    "invalid_auth": "Token is invalid or expired. Run 'slck config set-token' to set a new token.",
    "token_revoked": "Token has been revoked. Run 'slck config set-token' to set a new token.",
    "ratelimited": "Rate limit exceeded. Wait a moment and try again.",
    "user_not_found": "Verify the user ID is correct. Use 'slck users list' to find user IDs.",
    "message_not_found": "Message not found. Verify the channel ID and timestamp are correct.",
    "cant_delete_message": "Cannot delete this message. You can only delete messages sent by the bot.",
    "cant_update_message": "Cannot update this message. You can only update messages sent by the bot.",
    "already_archived": "Channel is already archived.",
    "not_archived": "Channel is not archived.",
    "name_taken": "A channel with this name already exists.",
    "invalid_name": "Invalid channel name. Use lowercase letters, numbers, and hyphens only.",
    "no_permission": "The token lacks permission for this action. Check the app's OAuth scopes.",
    "missing_scope": "Missing required OAuth scope. Update your app's permissions at api.slack.com/apps.",
    "account_inactive": "The user account is inactive or disabled.",
    "is_archived": "Cannot perform this action on an archived channel.",
    "too_many_attachments": "Message has too many attachments. Reduce and try again.",
    "msg_too_long": "Message is too long. Maximum is 40,000 characters.",
}


class SlackCliError(click.ClickException):
    """Base class for expected CLI failures."""

    hint: str | None = None

    def show(self, file=None) -> None:
        """Print the error, then the hint line when there is one."""
        super().show(file)
        if self.hint:
            click.echo(f"Hint: {self.hint}", file=file, err=file is None)


class ValidationError(SlackCliError):
    """Caller-supplied input failed a validation rule. No network was used."""


class AuthAbsentError(SlackCliError):
    """The credential kind required by the operation is not configured."""


class StorageError(SlackCliError):
    """Reading or writing the credential store failed."""


class TransportError(SlackCliError):
    """Connection, timeout or decoding failure talking to Slack."""


class SlackAPIError(SlackCliError):
    """Slack answered with ``ok: false``."""

    def __init__(self, code: str, endpoint: str = "") -> None:
        super().__init__(f"slack API error: {code}")
        self.code = code
        self.endpoint = endpoint


class OAuthError(SlackCliError):
    """Base class for OAuth login failures."""


class CSRFMismatchError(OAuthError):
    """The callback ``state`` did not match the one we generated."""

    def __init__(self) -> None:
        super().__init__("state mismatch - possible CSRF attack")


class OAuthTimeoutError(OAuthError):
    """No callback arrived before the login deadline."""

    def __init__(self, seconds: float) -> None:
        super().__init__(f"authorization timed out after {seconds:g} seconds")


class OAuthRejectedError(OAuthError):
    """Slack redirected back with an ``error`` parameter or without a code."""


class WrappedError(SlackCliError):
    """A failure annotated with the operation that produced it.

    The original exception stays reachable through :meth:`unwrap` (and
    ``__cause__`` when raised with ``from``).
    """

    def __init__(self, operation: str, cause: Exception, hint: str | None = None) -> None:
        super().__init__(f"{operation}: {_message_of(cause)}")
        self.operation = operation
        self.cause = cause
        self.hint = hint

    def unwrap(self) -> Exception:
        """Return the underlying error."""
        return self.cause


def _message_of(exc: Exception) -> str:
    if isinstance(exc, click.ClickException):
        return exc.format_message()
    return str(exc)


def hint_for(message: str) -> str | None:
    """Return the hint for the first known error code found in ``message``."""
    for code, hint in ERROR_HINTS.items():
        if code in message:
            return hint
    return None


def wrap_error(operation: str, exc: Exception) -> WrappedError:
    """Wrap ``exc`` with an operation label and a hint when one applies."""
    return WrappedError(operation, exc, hint_for(_message_of(exc)))
