"""SQLite-backed storage for users and notes."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import astuple, dataclass

_CREATE_NOTE = """
INSERT INTO notes (id, created_at, updated_at, note, user_id)
VALUES (?, ?, ?, ?, ?)
"""

_GET_NOTE = """
SELECT id, created_at, updated_at, note, user_id FROM notes WHERE id = ?
"""

_GET_NOTES_FOR_USER = """
SELECT id, created_at, updated_at, note, user_id FROM notes WHERE user_id = ?
"""

_CREATE_USER = """
INSERT INTO users (id, created_at, updated_at, name, api_key)
VALUES (?, ?, ?, ?, ?)
"""

_GET_USER = """
SELECT id, created_at, updated_at, name, api_key FROM users WHERE api_key = ?
"""


@dataclass(frozen=True)
class NoteRow:
    """A note as stored in the database."""

    id: str
    created_at: str
    updated_at: str
    note: str
    user_id: str


@dataclass(frozen=True)
class UserRow:
    """A user as stored in the database."""

    id: str
    created_at: str
    updated_at: str
    name: str
    api_key: str


class NotFoundError(LookupError):
    """Raised when a query expecting one row finds none."""


def connect(url: str) -> sqlite3.Connection:
    """Open a SQLite connection from a path, 'sqlite://' or 'file:' URL."""
    uri = False
    if url == "sqlite://":
        target = ":memory:"
    elif url.startswith("sqlite:///"):
        target = url[len("sqlite:///"):]
    elif url.startswith("file:"):
        target = url
        uri = True
    elif "://" in url:
        raise ValueError(f"unsupported database URL: {url}")
    else:
        target = url
    return sqlite3.connect(target, check_same_thread=False, uri=uri)


class Queries:
    """The queries the application runs against its database."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._in_transaction = False

    @contextmanager
    def transaction(self) -> Iterator[Queries]:
        """Run queries in one transaction, committed on success."""
        tx = Queries(self._conn)
        tx._in_transaction = True
        try:
            yield tx
        except BaseException:
            self._conn.rollback()
            raise
        else:
            self._conn.commit()

    def _exec(self, sql: str, params: tuple) -> None:
        self._conn.execute(sql, params)
        if not self._in_transaction:
            self._conn.commit()

    def _one(self, sql: str, key: str) -> tuple:
        row = self._conn.execute(sql, (key,)).fetchone()
        if row is None:
            raise NotFoundError("no rows in result set")
        return row

    def create_note(self, note: NoteRow) -> None:
        self._exec(_CREATE_NOTE, astuple(note))

    def get_note(self, note_id: str) -> NoteRow:
        return NoteRow(*self._one(_GET_NOTE, note_id))

    def get_notes_for_user(self, user_id: str) -> list[NoteRow]:
        cursor = self._conn.execute(_GET_NOTES_FOR_USER, (user_id,))
        return [NoteRow(*row) for row in cursor]

    def create_user(self, user: UserRow) -> None:
        self._exec(_CREATE_USER, astuple(user))

    def get_user(self, api_key: str) -> UserRow:
        return UserRow(*self._one(_GET_USER, api_key))