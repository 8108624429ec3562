from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import unquote, urlparse

import mysql.connector

from ..core.exceptions import ConnectionFailure

DEFAULT_PORT = 3306


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_url(cls, url: str, access_key: str) -> "DBConfig":
        """Build a config from the endpoint URL plus the access key.

        Example: ``mysql://leave_app@db.internal:3306/team_leave``. The key is used
        as the password; a password embedded in the URL is ignored.
        """
        parsed = urlparse(url if "://" in url else f"mysql://{url}")
        database = (parsed.path or "").lstrip("/")
        if not parsed.hostname or not database:
            raise ValueError(f"Invalid database URL: {url!r}")
        return cls(
            host=parsed.hostname,
            port=int(parsed.port or DEFAULT_PORT),
            user=unquote(parsed.username or "root"),
            password=access_key,
            database=database,
        )

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """DB connection factory held by the session context.

    Note: We create short-lived connections per operation (safe for simple Flask apps
    and for the worker threads used during probing/loading).
    """

    def __init__(self, config: DBConfig, *, connect_timeout: int = 10):
        self._config = config
        self._connect_timeout = connect_timeout

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        try:
            return mysql.connector.connect(
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
                connection_timeout=self._connect_timeout,
                autocommit=False,
            )
        except mysql.connector.Error as e:
            raise ConnectionFailure(str(e)) from e


@dataclass(frozen=True)
class RemoteBackend:
    """A configured remote database."""

    conn: DatabaseConnection
    configured: bool = True


@dataclass(frozen=True)
class NoRemoteBackend:
    """Explicit 'not configured' variant: credentials were not provided."""

    reason: str = "LEAVE_DB_URL / LEAVE_DB_KEY not set"
    configured: bool = False


@dataclass(frozen=True)
class InvalidRemoteBackend:
    """Credentials were provided but the endpoint URL cannot be used."""

    reason: str
    configured: bool = True


BackendHandle = Union[RemoteBackend, NoRemoteBackend, InvalidRemoteBackend]


def open_backend(url: Optional[str], access_key: Optional[str], *, connect_timeout: int = 10) -> BackendHandle:
    if not url or not access_key:
        return NoRemoteBackend()
    try:
        config = DBConfig.from_url(url, access_key)
    except ValueError as e:
        return InvalidRemoteBackend(str(e))
    return RemoteBackend(DatabaseConnection(config, connect_timeout=connect_timeout))
