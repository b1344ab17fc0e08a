"""Access to the task database over the SurrealDB JSON-RPC websocket interface."""

from __future__ import annotations

import itertools
import json
import logging
import threading
from typing import Any

import websocket

from .errors import AuthError, GeneralDbError, InsertionError
from .models import Record, RecordId

log = logging.getLogger(__name__)

NAMESPACE = "todo"
DATABASE = "todo"


def _endpoint(addr: Any) -> str:
    url = str(addr).rstrip("/")
    if "://" not in url:
        url = f"ws://{url}"
    if not url.endswith("/rpc"):
        url = f"{url}/rpc"
    return url


class SurrealConnection:
    """A websocket JSON-RPC connection to a SurrealDB server."""

    def __init__(self, addr: Any) -> None:
        self.url = _endpoint(addr)
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        try:
            self._socket = websocket.create_connection(self.url)
        except (OSError, websocket.WebSocketException) as exc:
            raise GeneralDbError(exc) from exc

    def call(self, method: str, *args: Any) -> Any:
        """Send one RPC request and return its result; raise GeneralDbError on failure."""
        with self._lock:
            request_id = next(self._ids)
            payload = json.dumps({"id": request_id, "method": method, "params": list(args)})
            try:
                self._socket.send(payload)
                while True:
                    reply = json.loads(self._socket.recv())
                    if isinstance(reply, dict) and reply.get("id") == request_id:
                        break
            except (OSError, ValueError, websocket.WebSocketException) as exc:
                raise GeneralDbError(exc) from exc

        error = reply.get("error")
        if error is not None:
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            raise GeneralDbError(RuntimeError(message))
        return reply.get("result")

    def close(self) -> None:
        self._socket.close()

    def __enter__(self) -> SurrealConnection:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _record_id(value: Any) -> RecordId:
    if isinstance(value, RecordId):
        return value
    if isinstance(value, str):
        table, sep, key = value.partition(":")
        if not sep:
            raise ValueError(f"not a record id: {value!r}")
        if len(key) >= 2 and ((key[0], key[-1]) in (("⟨", "⟩"), ("`", "`"))):
            key = key[1:-1]
        return RecordId(table, key)
    if isinstance(value, dict):
        inner = value.get("id")
        table = value.get("tb")
        if isinstance(inner, str) and isinstance(table, str):
            return RecordId(table, inner)
        return RecordId.from_json(value)
    raise ValueError(f"not a record id: {value!r}")


def _normalize(row: Any) -> dict:
    if not isinstance(row, dict):
        raise GeneralDbError(ValueError("expected a record object from the database"))
    row = dict(row)
    if "id" in row:
        try:
            row["id"] = _record_id(row["id"]).to_json()
        except ValueError as exc:
            raise GeneralDbError(exc) from exc
    return row


def _single(result: Any) -> Any:
    if isinstance(result, list):
        return result[0] if result else None
    return result


def _to_record(row: Any) -> Record:
    try:
        return Record(_record_id(row["id"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise GeneralDbError(exc) from exc


def _content(record: Any) -> Any:
    to_json = getattr(record, "to_json", None)
    return to_json() if callable(to_json) else record


class Database:
    """Table operations on the task database."""

    def __init__(self, connection: Any) -> None:
        self._conn = connection

    @staticmethod
    def connect(addr: Any, username: str, password: str) -> Database:
        """Connect, sign in as root and select the ``todo`` namespace and database."""
        log.info("Connecting to database with address `%s`", addr)
        conn = SurrealConnection(addr)

        log.info("Logging in with username = %s", username)
        try:
            conn.call("signin", {"user": username, "pass": password})
        except GeneralDbError as exc:
            conn.close()
            raise AuthError() from exc

        try:
            conn.call("use", NAMESPACE, DATABASE)
        except GeneralDbError:
            conn.close()
            raise

        log.info("Connected successfully!")
        return Database(conn)

    def insert(self, table: str, record: Any) -> Record:
        """Create a record in ``table`` and return a reference to it."""
        row = _single(self._conn.call("create", table, _content(record)))
        if not row:
            raise InsertionError(table, type(record).__name__)
        return _to_record(row)

    def select(self, table: str) -> list[dict]:
        """Return every row of ``table`` with ids in their structured form."""
        result = self._conn.call("select", table)
        if result is None:
            return []
        if not isinstance(result, list):
            result = [result]
        return [_normalize(row) for row in result]

    def update(self, table: str, record_id: str, record: Any) -> Record | None:
        """Replace a record's content; return None if it does not exist."""
        row = _single(self._conn.call("update", f"{table}:{record_id}", _content(record)))
        return _to_record(row) if row else None

    def delete(self, table: str, record_id: str) -> Record | None:
        """Delete a record; return None if it does not exist."""
        row = _single(self._conn.call("delete", f"{table}:{record_id}"))
        return _to_record(row) if row else None