"""Search query assembly.

Turns a free-text query plus structured filters into Slack's search
modifier syntax, e.g. ``deployment in:channels in:general from:@alice``.
"""

import re
from dataclasses import dataclass

from slack_chat_api.errors import ValidationError

DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# scope -> "in:" shorthand; "all" adds no modifier
SCOPE_MODIFIERS: dict[str, str | None] = {
    "all": None,
    "public": "in:channels",
    "private": "in:groups",
    "dm": "in:dms",
    "mpim": "in:mpdms",
}

SORT_FIELDS = ("score", "timestamp")
SORT_DIRECTIONS = ("asc", "desc")
MAX_SEARCH_COUNT = 100
MAX_SEARCH_PAGE = 100


@dataclass
class QueryOptions:
    """Structured search filters. Empty values add nothing to the query."""

    scope: str = ""
    in_channel: str = ""
    from_user: str = ""
    after: str = ""
    before: str = ""
    has_link: bool = False
    has_reaction: bool = False
    file_type: str = ""
    has_pin: bool = False


def validate_query_options(options: QueryOptions) -> None:
    """Check the scope name and the date formats of ``options``."""
    if options.scope and options.scope not in SCOPE_MODIFIERS:
        valid = ", ".join(SCOPE_MODIFIERS)
        raise ValidationError(f"invalid scope {options.scope!r}: must be one of {valid}")
    for flag, value in (("after", options.after), ("before", options.before)):
        if value and not DATE_RE.fullmatch(value):
            raise ValidationError(
                f"invalid date format for --{flag}: {value!r} (expected YYYY-MM-DD)"
            )


def build_query(text: str, options: QueryOptions | None = None) -> str:
    """Validate ``options`` and append their modifiers to ``text``.

    Modifier order is fixed: scope, in, from, after, before, has:link,
    has:reaction, has:pin, type.
    """
    if options is None:
        return text
    validate_query_options(options)

    modifiers: list[str] = []
    scope_modifier = SCOPE_MODIFIERS.get(options.scope) if options.scope else None
    if scope_modifier:
        modifiers.append(scope_modifier)
    if options.in_channel:
        modifiers.append(f"in:{options.in_channel.lstrip('#')}")
    if options.from_user:
        modifiers.append(f"from:@{options.from_user.lstrip('@')}")
    if options.after:
        modifiers.append(f"after:{options.after}")
    if options.before:
        modifiers.append(f"before:{options.before}")
    if options.has_link:
        modifiers.append("has:link")
    if options.has_reaction:
        modifiers.append("has:reaction")
    if options.has_pin:
        modifiers.append("has:pin")
    if options.file_type:
        modifiers.append(f"type:{options.file_type}")

    if not modifiers:
        return text
    return " ".join(part for part in [text, *modifiers] if part)


def validate_search_options(count: int, page: int, sort: str, sort_dir: str) -> None:
    """Check the page-based search paging and ordering parameters."""
    if not 1 <= count <= MAX_SEARCH_COUNT:
        raise ValidationError(f"count must be between 1 and {MAX_SEARCH_COUNT}")
    if not 1 <= page <= MAX_SEARCH_PAGE:
        raise ValidationError(f"page must be between 1 and {MAX_SEARCH_PAGE}")
    if sort not in SORT_FIELDS:
        raise ValidationError("sort must be 'score' or 'timestamp'")
    if sort_dir not in SORT_DIRECTIONS:
        raise ValidationError("sort-dir must be 'asc' or 'desc'")
