"""API-facing models built from database rows."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from notely.database import NoteRow, UserRow


def _parse_rfc3339(value: str) -> datetime:
    layout = "%Y-%m-%dT%H:%M:%S.%f%z" if "." in value else "%Y-%m-%dT%H:%M:%S%z"
    moment = datetime.strptime(value, layout)
    return moment.replace(tzinfo=timezone.utc) if not moment.utcoffset() else moment


def _format_rfc3339(moment: datetime) -> str:
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    zone = moment.strftime("%z")
    if not moment.utcoffset():
        return text + "Z"
    return f"{text}{zone[:3]}:{zone[3:5]}"


@dataclass(frozen=True)
class User:
    """A user as returned by the API."""

    id: str
    created_at: datetime
    updated_at: datetime
    name: str
    api_key: str

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "created_at": _format_rfc3339(self.created_at),
            "updated_at": _format_rfc3339(self.updated_at),
            "name": self.name,
            "api_key": self.api_key,
        }


@dataclass(frozen=True)
class Note:
    """A note as returned by the API."""

    id: str
    created_at: datetime
    updated_at: datetime
    note: str
    user_id: str

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "created_at": _format_rfc3339(self.created_at),
            "updated_at": _format_rfc3339(self.updated_at),
            "note": self.note,
            "user_id": self.user_id,
        }


def database_user_to_user(user: UserRow) -> User:
    """Convert a stored user, parsing its timestamps."""
    return User(
        id=user.id,
        created_at=_parse_rfc3339(user.created_at),
        updated_at=_parse_rfc3339(user.updated_at),
        name=user.name,
        api_key=user.api_key,
    )


def database_note_to_note(note: NoteRow) -> Note:
    """Convert a stored note, parsing its timestamps."""
    return Note(
        id=note.id,
        created_at=_parse_rfc3339(note.created_at),
        updated_at=_parse_rfc3339(note.updated_at),
        note=note.note,
        user_id=note.user_id,
    )


def database_notes_to_notes(notes: Iterable[NoteRow]) -> list[Note]:
    """Convert stored notes; any bad timestamp fails the whole conversion."""
    return [database_note_to_note(note) for note in notes]