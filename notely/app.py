"""Application assembly and the command that serves it."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from flask import Blueprint, Flask, Response, request

from notely.database import Queries, connect
from notely.handlers import ApiConfig, handler_readiness

logger = logging.getLogger(__name__)

_ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
_STATIC_DIR = Path(__file__).parent / "static"


def _cors_allowed(method: str) -> bool:
    origin = request.headers.get("Origin", "").lower()
    return origin.startswith(("https://", "http://")) and method.upper() in _ALLOWED_METHODS


def _is_preflight() -> bool:
    return request.method == "OPTIONS" and bool(
        request.headers.get("Access-Control-Request-Method")
    )


def _handle_preflight() -> Response | None:
    if not _is_preflight():
        return None
    response = Response(status=200)
    for name in ("Origin", "Access-Control-Request-Method", "Access-Control-Request-Headers"):
        response.headers.add("Vary", name)
    method = request.headers["Access-Control-Request-Method"]
    if not _cors_allowed(method):
        return response
    requested = [
        "-".join(p[:1].upper() + p[1:].lower() for p in item.strip().split("-"))
        for item in request.headers.get("Access-Control-Request-Headers", "").split(",")
        if item.strip()
    ]
    response.headers["Access-Control-Allow-Origin"] = request.headers["Origin"]
    response.headers["Access-Control-Allow-Methods"] = method.upper()
    if requested:
        response.headers["Access-Control-Allow-Headers"] = ", ".join(requested)
    response.headers["Access-Control-Max-Age"] = "300"
    return response


def _add_cors_headers(response: Response) -> Response:
    if _is_preflight():
        return response
    response.headers.add("Vary", "Origin")
    if _cors_allowed(request.method):
        response.headers["Access-Control-Allow-Origin"] = request.headers["Origin"]
        response.headers["Access-Control-Expose-Headers"] = "Link"
    return response


def _index() -> Response:
    try:
        body = (_STATIC_DIR / "index.html").read_bytes()
    except OSError as err:
        return Response(f"{err}\n", status=500, content_type="text/plain; charset=utf-8",
                        headers={"X-Content-Type-Options": "nosniff"})
    return Response(body, status=200, content_type="text/html; charset=utf-8")


def create_app(config: ApiConfig) -> Flask:
    """Build the application; CRUD endpoints exist only when a database is set."""
    app = Flask(__name__, static_folder=None)
    app.before_request(_handle_preflight)
    app.after_request(_add_cors_headers)
    app.add_url_rule("/", "index", _index, methods=["GET"])

    v1 = Blueprint("v1", __name__)
    if config.db is not None:
        auth = config.middleware_auth
        v1.add_url_rule("/users", "users_create", config.handler_users_create, methods=["POST"])
        v1.add_url_rule("/users", "users_get", auth(config.handler_users_get), methods=["GET"])
        v1.add_url_rule("/notes", "notes_get", auth(config.handler_notes_get), methods=["GET"])
        v1.add_url_rule("/notes", "notes_create", auth(config.handler_notes_create),
                        methods=["POST"])
    v1.add_url_rule("/healthz", "healthz", handler_readiness, methods=["GET"])
    app.register_blueprint(v1, url_prefix="/v1")
    return app


def main(argv: list[str] | None = None) -> None:
    """Serve the application on the port named by $PORT."""
    argparse.ArgumentParser(
        prog="notely", description="Serve the notes API. Configured by PORT and DATABASE_URL."
    ).parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    if not load_dotenv(".env"):
        logger.warning("warning: assuming default configuration. .env unreadable")

    port = os.environ.get("PORT", "")
    if not port:
        logger.critical("PORT environment variable is not set")
        raise SystemExit(1)

    config = ApiConfig()
    db_url = os.environ.get("DATABASE_URL", "")
    try:
        if not db_url:
            logger.info("DATABASE_URL environment variable is not set")
            logger.info("Running without CRUD endpoints")
        else:
            config.db = Queries(connect(db_url))
            logger.info("Connected to database!")
        app = create_app(config)
        logger.info("Serving on port: %s", port)
        app.run(host="0.0.0.0", port=int(port))
    except (ValueError, OSError) as err:
        logger.critical("%s", err)
        raise SystemExit(1) from err