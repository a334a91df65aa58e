"""slck - operate a Slack workspace from the terminal.

Channels, users, messages, reactions and search over the Slack Web API,
authenticated with a bot token (xoxb-) or a user token (xoxp-).
"""

__version__ = "0.4.0"
