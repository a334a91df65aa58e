"""Static settings and config paths."""

import os
from pathlib import Path

APP_NAME = "slack-chat-api"
PROG_NAME = "slck"

DEFAULT_BASE_URL = "https://slack.com/api"
REQUEST_TIMEOUT_SECONDS = 30

# Slack's recommended page size for cursor-paginated endpoints
MAX_PAGE_SIZE = 200

OAUTH_DEFAULT_PORT = 8085
OAUTH_TIMEOUT_SECONDS = 300

BOT_TOKEN_ENV = "SLACK_API_TOKEN"
USER_TOKEN_ENV = "SLACK_USER_TOKEN"


def config_dir() -> Path:
    """Return the per-user config directory.

    Resolved at call time so tests can point XDG_CONFIG_HOME elsewhere.
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME
