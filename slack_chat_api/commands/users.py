"""``slck users`` - list, inspect and search workspace members."""

import click

from slack_chat_api import output
from slack_chat_api.commands import common
from slack_chat_api.models import User
from slack_chat_api.validate import validate_limit, validate_user_id

SEARCH_FIELDS = ("all", "name", "email", "display_name")


def matches_query(user: User, query: str, field: str) -> bool:
    """Case-insensitive substring match of ``query`` against a user's fields."""
    query = query.lower()
    name = user.name.lower()
    real_name = user.real_name.lower()
    display_name = user.profile.display_name.lower()
    email = user.profile.email.lower()
    if field == "name":
        return query in name
    if field == "email":
        return query in email
    if field == "display_name":
        return query in display_name or query in real_name
    return query in name or query in real_name or query in display_name or query in email


def _print_users(users: list[User]) -> None:
    rows = [[u.id, u.name, u.real_name, u.profile.email] for u in users]
    output.print_rows(
        common.output_format(), ["ID", "Username", "Real Name", "Email"], rows, title="Users"
    )


@click.group()
def users() -> None:
    """Look up workspace members."""


@users.command("list")
@click.option("--limit", default=100, show_default=True, help="Maximum users to return.")
def list_users(limit: int) -> None:
    """List workspace members."""
    validate_limit(limit)
    result = common.get_client().list_users(limit=limit)

    if common.wants_json():
        output.print_records(result)
        return
    if not result:
        output.print_line("No users found")
        return
    _print_users(result)


@users.command("get")
@click.argument("user_id")
def get_user(user_id: str) -> None:
    """Show details for a user."""
    validate_user_id(user_id)
    user = common.get_client().get_user(user_id)

    if common.wants_json():
        output.print_json(user.to_dict())
        return
    status = f"{user.profile.status_emoji} {user.profile.status_text}".strip()
    output.print_fields(
        [
            ("ID", user.id),
            ("Username", user.name),
            ("Real Name", user.real_name),
            ("Display Name", user.profile.display_name),
            ("Email", user.profile.email),
            ("Admin", user.is_admin),
            ("Bot", user.is_bot),
            ("Status", status),
        ]
    )


@users.command("search")
@click.argument("query")
@click.option(
    "--field",
    type=click.Choice(SEARCH_FIELDS),
    default="all",
    show_default=True,
    help="Field to match against.",
)
@click.option("--include-bots", is_flag=True, default=False, help="Include bot users in results.")
@click.option("--limit", default=1000, show_default=True, help="Maximum users to search through.")
def search_users(query: str, field: str, include_bots: bool, limit: int) -> None:
    """Find users whose name, display name or email contains QUERY."""
    validate_limit(limit)
    members = common.get_client().list_users(limit=limit)
    found = [
        u for u in members if (include_bots or not u.is_bot) and matches_query(u, query, field)
    ]

    if common.wants_json():
        output.print_records(found)
        return
    if not found:
        output.print_line(f'No users found matching "{query}"')
        return
    output.print_line(f'Found {len(found)} users matching "{query}"')
    _print_users(found)
