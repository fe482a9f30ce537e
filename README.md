# notely

A small JSON web service for storing short notes. Each user gets a
randomly generated API key when they sign up, and uses it to read and
write their own notes. It is a Flask application backed by SQLite.

## Running the server

Start the service with:

```
notely
```

`notely --help` shows a short usage message; the command takes no other
options. Configuration comes from the environment. A `.env` file in the
current directory is loaded first if one exists; if it is missing or
empty, a warning is logged and the existing environment is used as is.

| Variable       | Meaning                                                     |
|----------------|-------------------------------------------------------------|
| `PORT`         | Port to listen on, on all interfaces. Required; the command exits with status 1 without it. |
| `DATABASE_URL` | Location of the SQLite database. Optional.                  |

`DATABASE_URL` may be:

- a plain file path, such as `notely.db`;
- `sqlite:///path/to/notely.db`;
- `sqlite://` for an in-memory database;
- a SQLite `file:` URI, such as `file:notely.db?mode=rw`.

Any other `scheme://` URL is rejected and the command exits with status 1.

When `DATABASE_URL` is not set the server still starts, but only the
health check and the index page are available; the user and note
endpoints are left out.

Example `.env`:

```
PORT=8080
DATABASE_URL=notely.db
```

The server is Flask's built-in development server, started with
`Flask.run`.

## Endpoints

All API responses are JSON. Errors look like `{"error": "message"}`.

| Method | Path          | Auth | Description                              |
|--------|---------------|------|------------------------------------------|
| GET    | `/`           | no   | Serves `notely/static/index.html`.       |
| GET    | `/v1/healthz` | no   | Returns `{"status": "ok"}`.              |
| POST   | `/v1/users`   | no   | Body `{"name": "..."}`; creates a user and returns it, API key included (201). |
| GET    | `/v1/users`   | yes  | Returns the authenticated user.          |
| GET    | `/v1/notes`   | yes  | Lists the authenticated user's notes.    |
| POST   | `/v1/notes`   | yes  | Body `{"note": "..."}`; creates a note (201). |

Authenticated requests carry the key in the `Authorization` header,
using the `ApiKey` scheme:

```
Authorization: ApiKey token
```

A missing or malformed header gives `401`; an unknown key gives `404`.
A request body that is not a JSON object of string fields gives `500`
with `"Couldn't decode parameters"`.

Users and notes are returned with RFC 3339 timestamps:

```json
{
  "id": "2f1c4f1e-8a8e-4d8e-9a55-6c0f4b1c2d3e",
  "created_at": "2024-01-01T12:00:00Z",
  "updated_at": "2024-01-01T12:00:00Z",
  "note": "buy milk",
  "user_id": "9b7e2a44-1f3d-4c52-8e0a-3b6d5f7c9e10"
}
```

Cross-origin requests from any `http://` or `https://` origin are
allowed for `GET`, `POST`, `PUT`, `DELETE` and `OPTIONS`; preflight
responses are cached for 300 seconds and the `Link` header is exposed.

## Using it as a library

The Flask application can be built directly, for example to serve it
with another WSGI server or to test it:

```python
from notely.app import create_app
from notely.database import Queries, connect
from notely.handlers import ApiConfig

config = ApiConfig(Queries(connect("notely.db")))
app = create_app(config)
```

The modules:

- `notely.auth`: `get_api_key(headers)` extracts the key from a
  request's headers and raises `NoAuthHeaderError` or
  `MalformedAuthHeaderError`, both subclasses of `AuthError`, when it
  cannot.
- `notely.database`: `connect(url)`, the `Queries` class
  (`create_user`, `get_user`, `create_note`, `get_note`,
  `get_notes_for_user`, and `transaction()` as a context manager that
  commits on success and rolls back on error), the row dataclasses
  `UserRow` and `NoteRow`, and `NotFoundError`, raised when a lookup
  finds no row.
- `notely.models`: the `User` and `Note` dataclasses with `to_json()`,
  and `database_user_to_user`, `database_note_to_note` and
  `database_notes_to_notes` to build them from rows.
- `notely.responses`: `respond_with_json(code, payload)` and
  `respond_with_error(code, msg, log_err)`.
- `notely.handlers`: `ApiConfig` with the request handlers and
  `middleware_auth`, `handler_readiness()` and
  `generate_random_sha256_hash()`.
- `notely.app`: `create_app(config)` and `main()`.

## What it does not do

- It does not create the database schema. The database must already
  hold a `users` table (`id`, `created_at`, `updated_at`, `name`,
  `api_key`) and a `notes` table (`id`, `created_at`, `updated_at`,
  `note`, `user_id`).
- It ships no `static/index.html`. Without one, `GET /` answers `500`
  with the file error as plain text; place the page at
  `notely/static/index.html` to serve it.
- There are no endpoints to update or delete users or notes.