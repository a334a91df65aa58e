"""Two-slot credential store for the bot and user tokens.

On macOS tokens live in the login Keychain (driven through the
``security`` binary). Elsewhere they go to a ``key=value`` file under the
XDG config directory with owner-only permissions. Environment variables
are consulted when nothing is persisted.
"""

import logging
import os
import subprocess
import sys
import tempfile
from pathlib import Path

from slack_chat_api import config
from slack_chat_api.errors import AuthAbsentError, StorageError, ValidationError

logger = logging.getLogger(__name__)

SERVICE_NAME = config.APP_NAME

BOT = "bot"
USER = "user"
KINDS = (BOT, USER)

ACCOUNT_NAMES = {BOT: "api_token", USER: "user_token"}
ENV_VARS = {BOT: config.BOT_TOKEN_ENV, USER: config.USER_TOKEN_ENV}
TOKEN_PREFIXES = {"xoxb-": BOT, "xoxp-": USER}

SOURCE_KEYCHAIN = "Keychain"
SOURCE_CONFIG_FILE = "config file"
SOURCE_ENV = "environment variable"

SECURITY_BIN = "/usr/bin/security"
# `security` exit status when the item does not exist
SECURITY_ITEM_NOT_FOUND = 44


def is_secure_storage() -> bool:
    """True when tokens are kept in the macOS Keychain."""
    return sys.platform == "darwin"


def credentials_path() -> Path:
    """Return the path of the plaintext credentials file."""
    return config.config_dir() / "credentials"


def detect_kind(token: str) -> str:
    """Return ``"bot"`` for xoxb- tokens, ``"user"`` for xoxp-, else ``"unknown"``."""
    for prefix, kind in TOKEN_PREFIXES.items():
        if token.startswith(prefix):
            return kind
    return "unknown"


def mask_token(token: str) -> str:
    """Hide the middle of a token for display."""
    if len(token) <= 12:
        return "*" * len(token)
    return token[:8] + "*" * (len(token) - 12) + token[-4:]


def _check_kind(kind: str) -> str:
    if kind not in KINDS:
        raise ValidationError(f"invalid token type: {kind!r} (must be bot or user)")
    return kind


# -- Keychain backend ---------------------------------------------------------


class KeychainBackend:
    """Generic-password items in the login Keychain, one per account."""

    source = SOURCE_KEYCHAIN

    def __init__(self, service: str = SERVICE_NAME, binary: str = SECURITY_BIN) -> None:
        self.service = service
        self.binary = binary

    def _run(self, args: list[str], stdin: str | None = None) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                [self.binary, *args],
                input=stdin,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise StorageError(f"cannot run {self.binary}: {exc}") from exc

    def get(self, account: str) -> str | None:
        """Return the stored secret for ``account``, or None when absent."""
        result = self._run(["find-generic-password", "-s", self.service, "-a", account, "-w"])
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def set(self, account: str, value: str) -> None:
        """Create or replace the item for ``account``."""
        self.delete(account)
        # Interactive mode reads the command from stdin, keeping the
        # secret out of the process argument list.
        command = (
            f"add-generic-password -U -s {_quote(self.service)} "
            f"-a {_quote(account)} -w {_quote(value)}\n"
        )
        result = self._run(["-i"], stdin=command)
        if result.returncode != 0 or "error" in result.stderr.lower():
            raise StorageError(
                f"failed to store {account} in Keychain: {result.stderr.strip() or result.returncode}"
            )

    def delete(self, account: str) -> bool:
        """Remove the item. Returns False when there was nothing to remove."""
        result = self._run(["delete-generic-password", "-s", self.service, "-a", account])
        if result.returncode == 0:
            return True
        if result.returncode == SECURITY_ITEM_NOT_FOUND:
            return False
        raise StorageError(
            f"failed to delete {account} from Keychain: {result.stderr.strip() or result.returncode}"
        )


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


# -- Config file backend ------------------------------------------------------


class FileBackend:
    """``key=value`` lines in a 0600 file inside a 0700 directory."""

    source = SOURCE_CONFIG_FILE

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        """Credentials file location, resolved lazily."""
        return self._path if self._path is not None else credentials_path()

    def _read_lines(self) -> list[str]:
        try:
            return self.path.read_text().splitlines()
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(f"cannot read {self.path}: {exc}") from exc

    def get(self, account: str) -> str | None:
        """Return the value on the ``account=`` line, or None."""
        for line in self._read_lines():
            key, sep, value = line.partition("=")
            if sep and key == account:
                return value
        return None

    def set(self, account: str, value: str) -> None:
        """Replace or append the ``account=`` line."""
        lines = self._read_lines()
        entry = f"{account}={value}"
        replaced = False
        for i, line in enumerate(lines):
            key, sep, _ = line.partition("=")
            if sep and key == account:
                lines[i] = entry
                replaced = True
        if not replaced:
            lines.append(entry)
        self._write_lines(lines)

    def delete(self, account: str) -> bool:
        """Drop the ``account=`` line; an emptied file is removed."""
        lines = self._read_lines()
        kept = [line for line in lines if line.partition("=")[0] != account or "=" not in line]
        if len(kept) == len(lines):
            return False
        if not any("=" in line for line in kept):
            try:
                self.path.unlink()
            except OSError as exc:
                raise StorageError(f"cannot remove {self.path}: {exc}") from exc
            logger.debug("Removed empty credentials file %s", self.path)
            return True
        self._write_lines(kept)
        return True

    def _write_lines(self, lines: list[str]) -> None:
        path = self.path
        try:
            path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            os.chmod(path.parent, 0o700)
            # mkstemp creates the file 0600
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".credentials-")
            try:
                with os.fdopen(fd, "w") as fh:
                    fh.write("\n".join(lines) + "\n")
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"cannot write {path}: {exc}") from exc
        logger.debug("Wrote %d entries to %s", len(lines), path)


def get_backend() -> KeychainBackend | FileBackend:
    """Pick the persistence backend for this platform."""
    if is_secure_storage():
        return KeychainBackend()
    return FileBackend()


# -- Public API ---------------------------------------------------------------


def stored_token(kind: str) -> str | None:
    """Return the persisted token for ``kind``, ignoring the environment."""
    return get_backend().get(ACCOUNT_NAMES[_check_kind(kind)])


def get_token(kind: str) -> str:
    """Resolve the token for ``kind``: persisted value first, then environment."""
    token = stored_token(kind)
    if token:
        return token
    env_token = os.environ.get(ENV_VARS[kind], "")
    if env_token:
        logger.debug("Using %s token from %s", kind, ENV_VARS[kind])
        return env_token
    raise AuthAbsentError(
        f"no {kind} token found - run 'slck config set-token' or set {ENV_VARS[kind]}"
    )


def set_token(kind: str, value: str) -> None:
    """Persist ``value`` in the ``kind`` slot of the active backend.

    Both backends are line oriented, so whitespace and control characters
    are refused before anything is written.
    """
    if not value:
        raise ValidationError("token cannot be empty")
    if any(ch.isspace() or not ch.isprintable() for ch in value):
        raise ValidationError("token must not contain whitespace or control characters")
    backend = get_backend()
    logger.debug("Storing %s token in %s", kind, backend.source)
    backend.set(ACCOUNT_NAMES[_check_kind(kind)], value)


def delete_token(kind: str) -> bool:
    """Remove the persisted token. Returns False when nothing was stored."""
    return get_backend().delete(ACCOUNT_NAMES[_check_kind(kind)])


def has_token(kind: str) -> bool:
    """True iff a token is persisted for ``kind`` (environment not consulted)."""
    return bool(stored_token(kind))


def token_source(kind: str) -> str:
    """Describe where :func:`get_token` would find the token, or ``""``."""
    if has_token(kind):
        return get_backend().source
    if os.environ.get(ENV_VARS[kind]):
        return SOURCE_ENV
    return ""
