"""HTTP handlers for users, notes and readiness, plus the API key middleware."""

from __future__ import annotations

import functools
import hashlib
import json
import secrets
import sqlite3
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from flask import Response, request

from notely.auth import AuthError, get_api_key
from notely.database import NoteRow, NotFoundError, Queries, UserRow
from notely.models import (
    database_note_to_note,
    database_notes_to_notes,
    database_user_to_user,
)
from notely.responses import respond_with_error, respond_with_json

_DB_ERRORS = (NotFoundError, sqlite3.Error)

AuthedHandler = Callable[[UserRow], Response]


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _decode_params(*fields: str) -> dict[str, str]:
    """Decode the JSON object in the request body into the given string fields.

    Keys match field names case-insensitively; missing fields are empty and
    anything after the first JSON value is ignored.
    """
    text = request.get_data(as_text=True).lstrip()
    value, _ = json.JSONDecoder().raw_decode(text)
    params = {field: "" for field in fields}
    if value is None:
        return params
    if not isinstance(value, dict):
        raise ValueError("request body is not a JSON object")
    for key, item in value.items():
        field = key.lower()
        if field not in params or item is None:
            continue
        if not isinstance(item, str):
            raise ValueError(f"field {key!r} is not a string")
        params[field] = item
    return params


def generate_random_sha256_hash() -> str:
    """Return the hex SHA-256 digest of 32 random bytes."""
    return hashlib.sha256(secrets.token_bytes(32)).hexdigest()


def handler_readiness() -> Response:
    """Report that the service is up."""
    return respond_with_json(HTTPStatus.OK, {"status": "ok"})


@dataclass
class ApiConfig:
    """Shared state for the handlers: the database queries, if any."""

    db: Queries | None = None

    def handler_users_create(self) -> Response:
        try:
            params = _decode_params("name")
        except ValueError as err:
            return respond_with_error(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Couldn't decode parameters", err
            )

        api_key = generate_random_sha256_hash()
        now = _now()
        try:
            self.db.create_user(
                UserRow(
                    id=str(uuid.uuid4()),
                    created_at=now,
                    updated_at=now,
                    name=params["name"],
                    api_key=api_key,
                )
            )
        except sqlite3.Error as err:
            return respond_with_error(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Couldn't create user", err
            )

        try:
            user = self.db.get_user(api_key)
        except _DB_ERRORS as err:
            return respond_with_error(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Couldn't get user", err
            )

        try:
            user_resp = database_user_to_user(user)
        except ValueError as err:
            return respond_with_error(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Couldn't convert user", err
            )
        return respond_with_json(HTTPStatus.CREATED, user_resp)

    def handler_users_get(self, user: UserRow) -> Response:
        try:
            user_resp = database_user_to_user(user)
        except ValueError as err:
            return respond_with_error(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Couldn't convert user", err
            )
        return respond_with_json(HTTPStatus.OK, user_resp)

    def handler_notes_get(self, user: UserRow) -> Response:
        try:
            posts = self.db.get_notes_for_user(user.id)
        except sqlite3.Error as err:
            return respond_with_error(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Couldn't get posts for user", err
            )

        try:
            posts_resp = database_notes_to_notes(posts)
        except ValueError as err:
            return respond_with_error(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Couldn't convert posts", err
            )
        return respond_with_json(HTTPStatus.OK, posts_resp)

    def handler_notes_create(self, user: UserRow) -> Response:
        try:
            params = _decode_params("note")
        except ValueError as err:
            return respond_with_error(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Couldn't decode parameters", err
            )

        note_id = str(uuid.uuid4())
        now = _now()
        try:
            self.db.create_note(
                NoteRow(
                    id=note_id,
                    created_at=now,
                    updated_at=now,
                    note=params["note"],
                    user_id=user.id,
                )
            )
        except sqlite3.Error as err:
            return respond_with_error(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Couldn't create note", err
            )

        try:
            note = self.db.get_note(note_id)
        except _DB_ERRORS as err:
            return respond_with_error(HTTPStatus.NOT_FOUND, "Couldn't get note", err)

        try:
            note_resp = database_note_to_note(note)
        except ValueError as err:
            return respond_with_error(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Couldn't convert note", err
            )
        return respond_with_json(HTTPStatus.CREATED, note_resp)

    def middleware_auth(self, handler: AuthedHandler) -> Callable[..., Any]:
        """Wrap a handler so it runs with the user named by the request's API key."""

        @functools.wraps(handler)
        def authed(**_: Any) -> Response:
            try:
                api_key = get_api_key(request.headers)
            except AuthError as err:
                return respond_with_error(
                    HTTPStatus.UNAUTHORIZED, "Couldn't find api key", err
                )
            try:
                user = self.db.get_user(api_key)
            except _DB_ERRORS as err:
                return respond_with_error(HTTPStatus.NOT_FOUND, "Couldn't get user", err)
            return handler(user)

        return authed