"""OAuth v2 login through a loopback redirect.

The browser is sent to Slack's authorize page; Slack redirects back to a
short-lived HTTP listener on ``localhost`` which hands the authorization
code to the waiting main thread. The code is then exchanged for a bot
token and stored in the credential store.
"""

import html
import logging
import queue
import secrets
import socket
import threading
import webbrowser
from collections.abc import Callable
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import parse_qs, urlencode, urlsplit

from slack_chat_api import config, credentials
from slack_chat_api.client import SlackClient
from slack_chat_api.errors import (
    CSRFMismatchError,
    OAuthError,
    OAuthRejectedError,
    OAuthTimeoutError,
)

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://slack.com/oauth/v2/authorize"
CALLBACK_PATH = "/callback"
LISTEN_HOST = "localhost"

# search:read is a user scope and cannot be granted to a bot token
BOT_SCOPES = (
    "channels:read",
    "channels:write",
    "chat:write",
    "users:read",
    "reactions:write",
    "team:read",
    "groups:read",
    "im:read",
    "mpim:read",
)

SUCCESS_PAGE = """<!DOCTYPE html>
<html>
<head><title>Success</title></head>
<body style="font-family: -apple-system, sans-serif; text-align: center; margin-top: 20vh;">
<h1>Authentication Successful</h1>
<p>You can close this window and return to the terminal.</p>
</body>
</html>"""

ERROR_PAGE = """<!DOCTYPE html>
<html>
<head><title>Authorization failed</title></head>
<body style="font-family: -apple-system, sans-serif; text-align: center; margin-top: 20vh;">
<h1>Authorization failed</h1>
<p>{message}</p>
</body>
</html>"""


def new_state() -> str:
    """Return a 16-byte random nonce, hex-encoded."""
    return secrets.token_hex(16)


def redirect_uri(port: int) -> str:
    """Return the callback URL registered with Slack for ``port``."""
    return f"http://{LISTEN_HOST}:{port}{CALLBACK_PATH}"


def authorize_url(
    client_id: str, redirect: str, state: str, scopes: tuple[str, ...] = BOT_SCOPES
) -> str:
    """Build the Slack authorize URL for a bot install."""
    query = urlencode(
        {
            "client_id": client_id,
            "scope": ",".join(scopes),
            "redirect_uri": redirect,
            "state": state,
        }
    )
    return f"{AUTHORIZE_URL}?{query}"


# -- Callback listener --------------------------------------------------------


class CallbackServer(HTTPServer):
    """Loopback listener that accepts exactly one terminal callback.

    The outcome (an authorization code, or the OAuthError describing why
    there is none) is put on a one-slot queue for the waiting thread.
    """

    def __init__(self, port: int, expected_state: str) -> None:
        # Bind the address the redirect URI host resolves to first
        family, _, _, _, sockaddr = socket.getaddrinfo(
            LISTEN_HOST, port, type=socket.SOCK_STREAM
        )[0]
        self.address_family = family
        super().__init__(sockaddr, CallbackHandler)
        self.expected_state = expected_state
        self.outcomes: queue.Queue = queue.Queue(maxsize=1)
        self.finished = threading.Event()

    @property
    def port(self) -> int:
        """The bound port, resolved when 0 was requested."""
        return self.server_address[1]

    def deliver(self, outcome: str | OAuthError) -> None:
        """Record the first terminal outcome; later ones are dropped."""
        if self.finished.is_set():
            return
        self.finished.set()
        self.outcomes.put_nowait(outcome)


class CallbackHandler(BaseHTTPRequestHandler):
    server: CallbackServer

    def do_GET(self) -> None:
        """Turn the redirect into a code or an OAuthError."""
        url = urlsplit(self.path)
        if url.path != CALLBACK_PATH:
            self.send_error(404)
            return
        if self.server.finished.is_set():
            self._respond(409, ERROR_PAGE.format(message="This login attempt is already complete."))
            return

        params = parse_qs(url.query)

        def first(key: str) -> str:
            return params.get(key, [""])[0]

        outcome: str | OAuthError
        if first("state") != self.server.expected_state:
            outcome = CSRFMismatchError()
        elif first("error"):
            outcome = OAuthRejectedError(f"OAuth error: {first('error')}")
        elif not first("code"):
            outcome = OAuthRejectedError("no code in callback")
        else:
            outcome = first("code")

        if isinstance(outcome, OAuthError):
            page = ERROR_PAGE.format(message=html.escape(outcome.format_message()))
            self._respond(400, page)
        else:
            self._respond(200, SUCCESS_PAGE)
        self.server.deliver(outcome)

    def _respond(self, status: int, page: str) -> None:
        body = page.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args) -> None:
        """Route access logs to the module logger instead of stderr."""
        logger.debug("callback listener: " + format, *args)


# -- Login flow ---------------------------------------------------------------


def _exchange_code(client_id: str, client_secret: str, code: str, redirect: str) -> str:
    return SlackClient().oauth_access(client_id, client_secret, code, redirect)


def _store_bot_token(token: str) -> None:
    credentials.set_token(credentials.BOT, token)


def login(
    client_id: str,
    client_secret: str,
    port: int = config.OAUTH_DEFAULT_PORT,
    *,
    timeout: float = config.OAUTH_TIMEOUT_SECONDS,
    state: str | None = None,
    open_browser: Callable[[str], bool] = webbrowser.open,
    on_authorize_url: Callable[[str], None] | None = None,
    exchange: Callable[[str, str, str, str], str] = _exchange_code,
    store: Callable[[str], None] = _store_bot_token,
) -> str:
    """Run the authorization-code flow and store the resulting bot token.

    Returns the token. Raises :class:`CSRFMismatchError`,
    :class:`OAuthRejectedError` or :class:`OAuthTimeoutError` when no usable
    code arrives; in those cases nothing is exchanged or stored.
    """
    if state is None:
        state = new_state()
    try:
        server = CallbackServer(port, state)
    except OSError as exc:
        raise OAuthError(f"cannot listen on port {port}: {exc}") from exc

    redirect = redirect_uri(server.port)
    url = authorize_url(client_id, redirect, state)
    thread = threading.Thread(target=server.serve_forever, name="oauth-callback", daemon=True)
    thread.start()
    logger.debug("Listening for OAuth callback on %s:%d", LISTEN_HOST, server.port)

    try:
        if on_authorize_url is not None:
            on_authorize_url(url)
        try:
            if not open_browser(url):
                logger.warning("Couldn't open a browser; visit the URL above to continue.")
        except webbrowser.Error as exc:
            logger.warning("Couldn't open a browser: %s", exc)

        try:
            outcome = server.outcomes.get(timeout=timeout)
        except queue.Empty:
            raise OAuthTimeoutError(timeout) from None
    finally:
        server.shutdown()
        server.server_close()
        thread.join()
        logger.debug("OAuth callback listener closed")

    if isinstance(outcome, OAuthError):
        raise outcome

    token = exchange(client_id, client_secret, outcome, redirect)
    store(token)
    return token
