"""Typed records decoded from Slack Web API responses."""

from dataclasses import asdict, dataclass, field


class Record:
    """Mixin giving every record a JSON-ready ``to_dict``."""

    def to_dict(self) -> dict:
        """Return the record as plain dicts and lists."""
        return asdict(self)


@dataclass
class Channel(Record):
    id: str
    name: str = ""
    is_private: bool = False
    is_archived: bool = False
    topic: str = ""
    purpose: str = ""
    num_members: int = 0

    @classmethod
    def from_api(cls, data: dict) -> "Channel":
        """Build from a conversation object."""
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            is_private=bool(data.get("is_private", False)),
            is_archived=bool(data.get("is_archived", False)),
            topic=(data.get("topic") or {}).get("value", ""),
            purpose=(data.get("purpose") or {}).get("value", ""),
            num_members=int(data.get("num_members") or 0),
        )

    @property
    def kind_label(self) -> str:
        """``Private`` or ``Public``, for the listing table."""
        return "Private" if self.is_private else "Public"


@dataclass
class UserProfile(Record):
    email: str = ""
    display_name: str = ""
    status_text: str = ""
    status_emoji: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "UserProfile":
        """Build from the ``profile`` block of a user object."""
        return cls(
            email=data.get("email", ""),
            display_name=data.get("display_name", ""),
            status_text=data.get("status_text", ""),
            status_emoji=data.get("status_emoji", ""),
        )


@dataclass
class User(Record):
    id: str
    name: str = ""
    real_name: str = ""
    is_admin: bool = False
    is_bot: bool = False
    profile: UserProfile = field(default_factory=UserProfile)

    @classmethod
    def from_api(cls, data: dict) -> "User":
        """Build from a ``users.list`` member or ``users.info`` user."""
        profile = data.get("profile") or {}
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            real_name=data.get("real_name") or profile.get("real_name", ""),
            is_admin=bool(data.get("is_admin", False)),
            is_bot=bool(data.get("is_bot", False)),
            profile=UserProfile.from_api(profile),
        )


@dataclass
class Message(Record):
    ts: str
    type: str = "message"
    user: str = ""
    text: str = ""
    thread_ts: str | None = None
    reply_count: int | None = None

    @classmethod
    def from_api(cls, data: dict) -> "Message":
        """Build from a history or replies entry."""
        return cls(
            ts=data.get("ts", ""),
            type=data.get("type", "message"),
            user=data.get("user") or data.get("bot_id", ""),
            text=data.get("text", ""),
            thread_ts=data.get("thread_ts"),
            reply_count=data.get("reply_count"),
        )


@dataclass
class Team(Record):
    id: str
    name: str = ""
    domain: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "Team":
        """Build from the ``team`` field of ``team.info``."""
        return cls(id=data.get("id", ""), name=data.get("name", ""), domain=data.get("domain", ""))


@dataclass
class AuthInfo(Record):
    """Identity behind a token, as reported by ``auth.test``."""

    team: str = ""
    user: str = ""
    team_id: str = ""
    user_id: str = ""
    bot_id: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "AuthInfo":
        """Build from an ``auth.test`` body."""
        return cls(
            team=data.get("team", ""),
            user=data.get("user", ""),
            team_id=data.get("team_id", ""),
            user_id=data.get("user_id", ""),
            bot_id=data.get("bot_id") or None,
        )


@dataclass
class ChannelRef(Record):
    id: str = ""
    name: str = ""


@dataclass
class MessageMatch(Record):
    channel: ChannelRef
    ts: str = ""
    user: str = ""
    username: str = ""
    text: str = ""
    permalink: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "MessageMatch":
        """Build from one ``messages.matches`` entry."""
        channel = data.get("channel") or {}
        return cls(
            channel=ChannelRef(id=channel.get("id", ""), name=channel.get("name", "")),
            ts=data.get("ts", ""),
            user=data.get("user", ""),
            username=data.get("username", ""),
            text=data.get("text", ""),
            permalink=data.get("permalink", ""),
        )


@dataclass
class FileMatch(Record):
    id: str
    name: str = ""
    title: str = ""
    filetype: str = ""
    user: str = ""
    created: int = 0
    permalink: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "FileMatch":
        """Build from one ``files.matches`` entry."""
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            title=data.get("title", ""),
            filetype=data.get("filetype", ""),
            user=data.get("user", ""),
            created=int(data.get("created") or 0),
            permalink=data.get("permalink", ""),
        )


@dataclass
class SearchPaging(Record):
    count: int = 0
    total: int = 0
    page: int = 1
    pages: int = 1

    @classmethod
    def from_api(cls, data: dict) -> "SearchPaging":
        """Build from a ``paging`` block."""
        return cls(
            count=int(data.get("count") or 0),
            total=int(data.get("total") or 0),
            page=int(data.get("page") or 1),
            pages=int(data.get("pages") or 1),
        )


@dataclass
class MessageGroup(Record):
    total: int = 0
    paging: SearchPaging = field(default_factory=SearchPaging)
    matches: list[MessageMatch] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "MessageGroup":
        """Build from the ``messages`` section of a search body."""
        return cls(
            total=int(data.get("total") or 0),
            paging=SearchPaging.from_api(data.get("paging") or {}),
            matches=[MessageMatch.from_api(m) for m in data.get("matches") or []],
        )


@dataclass
class FileGroup(Record):
    total: int = 0
    paging: SearchPaging = field(default_factory=SearchPaging)
    matches: list[FileMatch] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "FileGroup":
        """Build from the ``files`` section of a search body."""
        return cls(
            total=int(data.get("total") or 0),
            paging=SearchPaging.from_api(data.get("paging") or {}),
            matches=[FileMatch.from_api(f) for f in data.get("matches") or []],
        )


@dataclass
class SearchResult(Record):
    query: str
    messages: MessageGroup | None = None
    files: FileGroup | None = None

    @classmethod
    def from_api(cls, query: str, data: dict) -> "SearchResult":
        """Decode a search body; sections absent from it stay None."""
        messages = data.get("messages")
        files = data.get("files")
        return cls(
            query=query,
            messages=MessageGroup.from_api(messages) if messages is not None else None,
            files=FileGroup.from_api(files) if files is not None else None,
        )

    def to_dict(self) -> dict:
        """Like :meth:`Record.to_dict`, minus the sections the search skipped."""
        data = asdict(self)
        return {key: value for key, value in data.items() if value is not None}
