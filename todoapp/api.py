"""HTTP service exposing the task table as a JSON API."""

from __future__ import annotations

import argparse
import logging
from typing import Any

from flask import Flask, jsonify, request

from .errors import ApiError, GeneralDbError, InvalidInputError
from .logger import Logger
from .models import Task, TaskResult
from .store import Database

log = logging.getLogger(__name__)

TABLE = "tasks"
VERSION = "0.1.0"

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, PATCH, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "*",
    "Access-Control-Allow-Credentials": "true",
}

_TASK_SCHEMA = {
    "type": "object",
    "required": ["title", "completed"],
    "properties": {"title": {"type": "string"}, "completed": {"type": "boolean"}},
}

_ID_PARAM = [{"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}]
_ERRORS = {code: {"description": ""} for code in ("400", "404", "500")}
_JSON_BODY = {"required": True, "content": {"application/json": {"schema": _TASK_SCHEMA}}}


def _operation(operation_id: str, **extra: Any) -> dict:
    return {
        "tags": ["Tasks"],
        "operationId": operation_id,
        "responses": {"200": {"description": ""}, **_ERRORS},
        **extra,
    }


OPENAPI_SPEC = {
    "openapi": "3.0.0",
    "info": {"title": "todo_api", "version": VERSION},
    "paths": {
        "/api/tasks": {
            "get": _operation("tasks"),
            "post": _operation("tasks_create", requestBody=_JSON_BODY),
        },
        "/api/tasks/delete/{id}": {
            "post": _operation("tasks_delete", parameters=_ID_PARAM),
        },
        "/api/tasks/update/{id}": {
            "post": _operation("tasks_update", parameters=_ID_PARAM, requestBody=_JSON_BODY),
        },
    },
}


def _task_from_request() -> Task:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise InvalidInputError()
    try:
        return Task.from_json({key: body[key] for key in ("title", "completed") if key in body})
    except ValueError as exc:
        raise InvalidInputError() from exc


def create_app(database: Any) -> Flask:
    """Build the web application serving tasks from ``database``."""
    app = Flask(__name__)

    @app.get("/api/tasks")
    def tasks():
        rows = database.select(TABLE)
        try:
            results = [TaskResult.from_json(row).to_json() for row in rows]
        except ValueError as exc:
            raise GeneralDbError(exc) from exc
        return jsonify({"tasks": results})

    @app.post("/api/tasks")
    def tasks_create():
        created = database.insert(TABLE, _task_from_request())
        return jsonify(created.to_json())

    @app.post("/api/tasks/delete/<task_id>")
    def tasks_delete(task_id: str):
        try:
            deleted = database.delete(TABLE, task_id) is not None
        except ApiError:
            deleted = False
        return jsonify({"deleted": deleted})

    @app.post("/api/tasks/update/<task_id>")
    def tasks_update(task_id: str):
        task = _task_from_request()
        try:
            updated = database.update(TABLE, task_id, task) is not None
        except ApiError:
            updated = False
        return jsonify({"updated": updated})

    @app.get("/api/openapi.json")
    def openapi():
        return jsonify(OPENAPI_SPEC)

    @app.errorhandler(ApiError)
    def api_error(err: ApiError):
        return jsonify(err.to_json()), err.status

    @app.after_request
    def cors(response):
        response.headers.update(_CORS_HEADERS)
        if request.method == "OPTIONS":
            response.set_data("")
            response.content_type = "text/plain; charset=utf-8"
            response.status_code = 200
        return response

    return app


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse the server's command line."""
    parser = argparse.ArgumentParser(prog="todo_api")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-A", "--addr", required=True, help="Database address")
    parser.add_argument("-U", "--username", required=True, help="Authentication username")
    parser.add_argument("-P", "--passwd", required=True, help="Authentication password")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Connect to the database and serve the API."""
    Logger.try_init()
    args = parse_args(argv)

    try:
        database = Database.connect(args.addr, args.username, args.passwd)
    except ApiError as exc:
        log.error("Failed to connect to the database: %s", exc)
        raise SystemExit(1) from exc

    create_app(database).run(host="127.0.0.1", port=8000)


if __name__ == "__main__":
    main()