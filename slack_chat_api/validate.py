"""Input validation and message timestamp normalization.

Pure functions, no I/O. Message timestamps are accepted in three forms and
reduced to Slack's API form before any request is built:

    1234567890.123456                                   (API form)
    p1234567890123456                                   (p-form)
    https://acme.slack.com/archives/C01/p1234567890123456  (message URL)
"""

import re

from slack_chat_api.errors import ValidationError

CHANNEL_ID_RE = re.compile(r"[CG][A-Z0-9]+")
USER_ID_RE = re.compile(r"[UW][A-Z0-9]+")
TIMESTAMP_RE = re.compile(r"[0-9]+\.[0-9]+")
URL_TIMESTAMP_RE = re.compile(r"/p([0-9]{16})(?:\?|\Z)")
P_TIMESTAMP_RE = re.compile(r"p([0-9]{16})")

MIN_LIMIT = 1
MAX_LIMIT = 1000


def validate_channel_id(channel_id: str) -> str:
    """Check a channel ID (C… public, G… private/group) and return it."""
    if not CHANNEL_ID_RE.fullmatch(channel_id):
        raise ValidationError(
            f"invalid channel ID {channel_id!r}: must start with C or G (e.g., C01234ABCDE)"
        )
    return channel_id


def validate_user_id(user_id: str) -> str:
    """Check a user ID (U… regular, W… enterprise) and return it."""
    if not USER_ID_RE.fullmatch(user_id):
        raise ValidationError(
            f"invalid user ID {user_id!r}: must start with U or W (e.g., U01234ABCDE)"
        )
    return user_id


def _split_digits(digits: str) -> str:
    return f"{digits[:10]}.{digits[10:]}"


def normalize_timestamp(value: str) -> str:
    """Reduce a URL or p-form timestamp to API form.

    Never fails: input that matches neither form comes back stripped but
    otherwise unchanged, so :func:`validate_timestamp` can report it.
    """
    value = value.strip()
    match = URL_TIMESTAMP_RE.search(value)
    if match:
        return _split_digits(match.group(1))
    match = P_TIMESTAMP_RE.fullmatch(value)
    if match:
        return _split_digits(match.group(1))
    return value


def validate_timestamp(value: str) -> None:
    """Raise ValidationError unless ``value`` normalizes to ``<seconds>.<micros>``."""
    if not TIMESTAMP_RE.fullmatch(normalize_timestamp(value)):
        raise ValidationError(
            f"invalid timestamp {value!r}: must be format 1234567890.123456, "
            "p1234567890123456, or a Slack message URL"
        )


def require_timestamp(value: str) -> str:
    """Validate a timestamp in any accepted form and return its API form."""
    validate_timestamp(value)
    return normalize_timestamp(value)


def normalize_emoji(name: str) -> str:
    """Strip surrounding colons from an emoji name (``:+1:`` -> ``+1``)."""
    return name.strip(":")


def validate_limit(limit: int) -> int:
    """Check a result limit is within 1..1000 and return it."""
    if limit < MIN_LIMIT:
        raise ValidationError(f"invalid limit {limit}: must be at least {MIN_LIMIT}")
    if limit > MAX_LIMIT:
        raise ValidationError(f"invalid limit {limit}: must be at most {MAX_LIMIT}")
    return limit
