"""Slack Web API transport and endpoint operations.

:class:`SlackClient` sits on top of ``slack_sdk.WebClient``. It decodes the
``{ok, error}`` envelope every Slack method returns, maps failures into the
CLI error taxonomy, labels them with the operation that failed, and walks
cursor pagination up to a caller-supplied limit.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackClientError

from slack_chat_api import config, credentials
from slack_chat_api.errors import (
    SlackAPIError,
    SlackCliError,
    TransportError,
    ValidationError,
    wrap_error,
)
from slack_chat_api.models import (
    AuthInfo,
    Channel,
    Message,
    SearchResult,
    Team,
    User,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# -- Pagination ---------------------------------------------------------------


def collect_pages(
    fetch: Callable[[str, int], tuple[list[T], str]],
    limit: int,
    page_size: int = config.MAX_PAGE_SIZE,
) -> list[T]:
    """Accumulate cursor-paginated items until ``limit`` is reached.

    ``fetch(cursor, size)`` returns one page of items plus the next cursor
    ("" when there are no more pages). Items keep server order and the
    result is truncated to ``limit``.
    """
    items: list[T] = []
    cursor = ""
    remaining = limit
    while remaining > 0:
        batch, cursor = fetch(cursor, min(remaining, page_size))
        items.extend(batch)
        remaining -= len(batch)
        logger.debug("Fetched %d items, %d remaining", len(batch), max(remaining, 0))
        if not cursor:
            break
    return items[:limit]


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def _error_code(exc: SlackApiError) -> str | None:
    data = getattr(exc.response, "data", exc.response)
    if isinstance(data, dict):
        return data.get("error")
    return None


# -- Client -------------------------------------------------------------------


class SlackClient:
    """Typed access to the Slack Web API methods the CLI uses.

    ``web_client`` is the HTTP seam: tests pass a mock or a WebClient
    pointed at a local server.
    """

    def __init__(
        self,
        base_url: str = config.DEFAULT_BASE_URL,
        token: str | None = None,
        web_client: WebClient | None = None,
        kind: str | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.kind = kind
        if web_client is None:
            web_client = WebClient(
                token=token,
                base_url=self.base_url + "/",
                timeout=config.REQUEST_TIMEOUT_SECONDS,
                retry_handlers=[],
            )
        self._web = web_client

    @classmethod
    def for_kind(cls, kind: str) -> "SlackClient":
        """Build a client bound to the stored bot or user token."""
        token = credentials.get_token(kind)
        return cls(config.DEFAULT_BASE_URL, token, kind=kind)

    # -- transport ------------------------------------------------------------

    def _request(self, endpoint: str, http_verb: str, **kwargs) -> dict:
        logger.debug("%s %s", http_verb, endpoint)
        try:
            response = self._web.api_call(endpoint, http_verb=http_verb, **kwargs)
        except SlackApiError as exc:
            code = _error_code(exc)
            if code:
                raise SlackAPIError(code, endpoint) from exc
            raise TransportError(f"unexpected response from {endpoint}: {exc}") from exc
        except (SlackClientError, OSError, ValueError) as exc:
            raise TransportError(f"request to {endpoint} failed: {exc}") from exc

        body = getattr(response, "data", response)
        if not isinstance(body, dict):
            raise TransportError(f"unexpected response from {endpoint}: not a JSON object")
        if not body.get("ok"):
            raise SlackAPIError(body.get("error") or "unknown_error", endpoint)
        return body

    def _call(self, endpoint: str, operation: str, http_verb: str = "POST", **kwargs) -> dict:
        try:
            return self._request(endpoint, http_verb, **kwargs)
        except SlackCliError as exc:
            raise wrap_error(operation, exc) from exc

    def _get(self, endpoint: str, params: dict | None, operation: str) -> dict:
        return self._call(endpoint, operation, "GET", params=params)

    def _post(self, endpoint: str, payload: dict, operation: str) -> dict:
        return self._call(endpoint, operation, "POST", json=payload)

    def _paginate(
        self,
        endpoint: str,
        key: str,
        params: dict,
        limit: int,
        factory: Callable[[dict], T],
        operation: str,
    ) -> list[T]:
        def fetch(cursor: str, size: int) -> tuple[list[T], str]:
            """Fetch one page starting at ``cursor``."""
            page_params = {**params, "limit": size}
            if cursor:
                page_params["cursor"] = cursor
            body = self._get(endpoint, page_params, operation)
            next_cursor = (body.get("response_metadata") or {}).get("next_cursor") or ""
            return [factory(item) for item in body.get(key) or []], next_cursor

        return collect_pages(fetch, limit)

    # -- channels -------------------------------------------------------------

    def list_channels(
        self, types: str = "", exclude_archived: bool = True, limit: int = 100
    ) -> list[Channel]:
        """List conversations visible to the token, up to ``limit``.

        ``types`` is passed through as Slack's comma-separated conversation
        types filter; archived channels are skipped unless
        ``exclude_archived`` is False.
        """
        params: dict = {"exclude_archived": _bool_param(exclude_archived)}
        if types:
            params["types"] = types
        return self._paginate(
            "conversations.list", "channels", params, limit, Channel.from_api, "list channels"
        )

    def get_channel(self, channel_id: str) -> Channel:
        """Fetch one conversation by ID."""
        body = self._get(
            "conversations.info", {"channel": channel_id}, f"get channel {channel_id}"
        )
        return Channel.from_api(body.get("channel") or {})

    def create_channel(self, name: str, is_private: bool = False) -> Channel:
        """Create a public or private channel and return it."""
        body = self._post(
            "conversations.create",
            {"name": name, "is_private": is_private},
            f"create channel {name}",
        )
        return Channel.from_api(body.get("channel") or {})

    def archive_channel(self, channel_id: str) -> None:
        """Archive a channel."""
        self._post(
            "conversations.archive", {"channel": channel_id}, f"archive channel {channel_id}"
        )

    def unarchive_channel(self, channel_id: str) -> None:
        """Unarchive a channel. Bot tokens cannot rejoin archived channels."""
        self._post(
            "conversations.unarchive", {"channel": channel_id}, f"unarchive channel {channel_id}"
        )

    def set_channel_topic(self, channel_id: str, topic: str) -> None:
        """Set the channel topic shown in the header."""
        self._post(
            "conversations.setTopic",
            {"channel": channel_id, "topic": topic},
            f"set topic for channel {channel_id}",
        )

    def set_channel_purpose(self, channel_id: str, purpose: str) -> None:
        """Set the channel description."""
        self._post(
            "conversations.setPurpose",
            {"channel": channel_id, "purpose": purpose},
            f"set purpose for channel {channel_id}",
        )

    def invite_to_channel(self, channel_id: str, users: list[str]) -> None:
        """Invite ``users`` (user IDs) to ``channel_id`` in one request."""
        self._post(
            "conversations.invite",
            {"channel": channel_id, "users": ",".join(users)},
            f"invite users to channel {channel_id}",
        )

    # -- users ----------------------------------------------------------------

    def list_users(self, limit: int = 100) -> list[User]:
        """List workspace members, up to ``limit``."""
        return self._paginate("users.list", "members", {}, limit, User.from_api, "list users")

    def get_user(self, user_id: str) -> User:
        """Fetch one user, including the profile block."""
        body = self._get("users.info", {"user": user_id}, f"get user {user_id}")
        return User.from_api(body.get("user") or {})

    # -- messages -------------------------------------------------------------

    def send_message(
        self,
        channel: str,
        text: str = "",
        thread_ts: str | None = None,
        blocks: list | None = None,
        unfurl: bool = True,
    ) -> Message:
        """Post a message. ``text`` may be empty when ``blocks`` are given."""
        payload = self._message_payload(channel, text, blocks, unfurl)
        if thread_ts:
            payload["thread_ts"] = thread_ts
        body = self._post("chat.postMessage", payload, "send message")
        message = Message.from_api(body.get("message") or {})
        message.ts = body.get("ts") or message.ts
        return message

    def update_message(
        self,
        channel: str,
        ts: str,
        text: str = "",
        blocks: list | None = None,
        unfurl: bool = True,
    ) -> None:
        """Replace the text and/or blocks of the message at ``ts``."""
        payload = self._message_payload(channel, text, blocks, unfurl)
        payload["ts"] = ts
        self._post("chat.update", payload, f"update message {ts}")

    @staticmethod
    def _message_payload(channel: str, text: str, blocks: list | None, unfurl: bool) -> dict:
        if not text and not blocks:
            raise ValidationError(
                "message text cannot be empty (or provide blocks via --blocks, "
                "--blocks-file, or --blocks-stdin)"
            )
        payload: dict = {"channel": channel, "unfurl_links": unfurl, "unfurl_media": unfurl}
        if text:
            payload["text"] = text
        if blocks:
            payload["blocks"] = blocks
        return payload

    def delete_message(self, channel: str, ts: str) -> None:
        """Delete the message at ``ts``."""
        self._post("chat.delete", {"channel": channel, "ts": ts}, f"delete message {ts}")

    def channel_history(
        self,
        channel: str,
        limit: int = 20,
        oldest: str | None = None,
        latest: str | None = None,
    ) -> list[Message]:
        """Return up to ``limit`` messages, newest first.

        ``oldest`` and ``latest`` bound the window by timestamp and are only
        sent when given.
        """
        params: dict = {"channel": channel}
        if oldest:
            params["oldest"] = oldest
        if latest:
            params["latest"] = latest
        return self._paginate(
            "conversations.history",
            "messages",
            params,
            limit,
            Message.from_api,
            f"get history for channel {channel}",
        )

    def thread_replies(self, channel: str, thread_ts: str, limit: int = 100) -> list[Message]:
        """Return the parent message followed by its replies."""
        return self._paginate(
            "conversations.replies",
            "messages",
            {"channel": channel, "ts": thread_ts},
            limit,
            Message.from_api,
            f"get replies for thread {thread_ts}",
        )

    def add_reaction(self, channel: str, ts: str, emoji: str) -> None:
        """React to a message; ``emoji`` is a bare name without colons."""
        self._post(
            "reactions.add",
            {"channel": channel, "timestamp": ts, "name": emoji},
            f"add reaction :{emoji}:",
        )

    def remove_reaction(self, channel: str, ts: str, emoji: str) -> None:
        """Remove the token owner's ``emoji`` reaction."""
        self._post(
            "reactions.remove",
            {"channel": channel, "timestamp": ts, "name": emoji},
            f"remove reaction :{emoji}:",
        )

    # -- workspace / auth -----------------------------------------------------

    def team_info(self) -> Team:
        """Describe the workspace the token belongs to."""
        body = self._get("team.info", None, "get workspace info")
        return Team.from_api(body.get("team") or {})

    def auth_test(self) -> AuthInfo:
        """Identify the token: user, team and bot IDs."""
        body = self._post("auth.test", {}, "test authentication")
        return AuthInfo.from_api(body)

    def oauth_access(
        self, client_id: str, client_secret: str, code: str, redirect_uri: str
    ) -> str:
        """Exchange an OAuth authorization code for an access token."""
        body = self._call(
            "oauth.v2.access",
            "exchange authorization code",
            "POST",
            data={
                "client_id": client_id,
                "client_secret": client_secret,
                "code": code,
                "redirect_uri": redirect_uri,
            },
        )
        token = body.get("access_token")
        if not token:
            raise TransportError("oauth.v2.access response did not include an access_token")
        return token

    # -- search (user token) --------------------------------------------------

    def _search(
        self,
        endpoint: str,
        query: str,
        count: int,
        page: int,
        sort: str,
        sort_dir: str,
        highlight: bool,
        include_bots: bool,
    ) -> SearchResult:
        params: dict = {
            "query": query,
            "count": count,
            "page": page,
            "sort": sort,
            "sort_dir": sort_dir,
        }
        if highlight:
            params["highlight"] = "true"
        if include_bots:
            params["search_exclude_bots"] = "false"
        body = self._get(endpoint, params, f"search {endpoint.split('.', 1)[1]}")
        return SearchResult.from_api(query, body)

    def search_messages(
        self,
        query: str,
        count: int = 20,
        page: int = 1,
        sort: str = "score",
        sort_dir: str = "desc",
        highlight: bool = False,
        include_bots: bool = False,
    ) -> SearchResult:
        """Search messages. Requires a user token."""
        return self._search(
            "search.messages", query, count, page, sort, sort_dir, highlight, include_bots
        )

    def search_files(
        self,
        query: str,
        count: int = 20,
        page: int = 1,
        sort: str = "score",
        sort_dir: str = "desc",
        highlight: bool = False,
        include_bots: bool = False,
    ) -> SearchResult:
        """Search files shared in the workspace."""
        return self._search(
            "search.files", query, count, page, sort, sort_dir, highlight, include_bots
        )

    def search_all(
        self,
        query: str,
        count: int = 20,
        page: int = 1,
        sort: str = "score",
        sort_dir: str = "desc",
        highlight: bool = False,
        include_bots: bool = False,
    ) -> SearchResult:
        """Search messages and files together."""
        return self._search(
            "search.all", query, count, page, sort, sort_dir, highlight, include_bots
        )
