from datetime import datetime, timedelta, timezone

import pytest

from notely.database import NoteRow, UserRow
from notely.models import (
    Note,
    User,
    database_note_to_note,
    database_notes_to_notes,
    database_user_to_user,
)

STAMP = "2024-01-02T03:04:05Z"


def test_user_conversion_parses_times():
    user = database_user_to_user(UserRow("u1", STAMP, STAMP, "alice", "token"))
    assert user == User(
        id="u1",
        created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        name="alice",
        api_key="token",
    )


def test_user_to_json_round_trip():
    row = UserRow("u1", STAMP, "2024-02-03T04:05:06Z", "alice", "token")
    assert database_user_to_user(row).to_json() == {
        "id": "u1",
        "created_at": STAMP,
        "updated_at": "2024-02-03T04:05:06Z",
        "name": "alice",
        "api_key": "token",
    }


def test_note_to_json_round_trip():
    row = NoteRow("n1", STAMP, STAMP, "hello", "u1")
    assert database_note_to_note(row).to_json() == {
        "id": "n1",
        "created_at": STAMP,
        "updated_at": STAMP,
        "note": "hello",
        "user_id": "u1",
    }


def test_offset_is_kept():
    stamp = "2024-01-02T03:04:05+02:00"
    note = database_note_to_note(NoteRow("n1", stamp, stamp, "x", "u1"))
    assert note.created_at.utcoffset() == timedelta(hours=2)
    assert note.to_json()["created_at"] == stamp


def test_zero_offset_formats_as_z():
    stamp = "2024-01-02T03:04:05+00:00"
    note = database_note_to_note(NoteRow("n1", stamp, stamp, "x", "u1"))
    assert note.to_json()["updated_at"] == STAMP


def test_fraction_trailing_zeros_dropped():
    stamp = "2024-01-02T03:04:05.500Z"
    note = database_note_to_note(NoteRow("n1", stamp, stamp, "x", "u1"))
    assert note.to_json()["created_at"] == "2024-01-02T03:04:05.5Z"


@pytest.mark.parametrize(
    "bad",
    ["", "2024-01-02", "2024-01-02 03:04:05Z", "2024-13-02T03:04:05Z", "2024-01-02T03:04:05"],
)
def test_bad_timestamp_raises(bad):
    with pytest.raises(ValueError):
        database_user_to_user(UserRow("u1", bad, STAMP, "alice", "token"))


def test_notes_conversion_preserves_order():
    rows = [NoteRow(f"n{i}", STAMP, STAMP, "x", "u1") for i in range(3)]
    notes = database_notes_to_notes(rows)
    assert [n.id for n in notes] == ["n0", "n1", "n2"]
    assert all(isinstance(n, Note) for n in notes)


def test_notes_conversion_fails_on_any_bad_row():
    rows = [
        NoteRow("n1", STAMP, STAMP, "x", "u1"),
        NoteRow("n2", STAMP, "garbage", "x", "u1"),
    ]
    with pytest.raises(ValueError):
        database_notes_to_notes(rows)


def test_empty_notes_conversion():
    assert database_notes_to_notes([]) == []