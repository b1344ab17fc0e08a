"""Task records and their JSON forms as exchanged with the database and API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _field(data: Any, key: str, kind: type, what: str) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object for {what}")
    if key not in data:
        raise ValueError(f"missing field `{key}` in {what}")
    value = data[key]
    if not isinstance(value, kind):
        raise ValueError(f"field `{key}` in {what} has the wrong type")
    return value


@dataclass(frozen=True)
class RecordId:
    """A database record identifier: table name plus key."""

    table: str = ""
    inner: str = ""

    @staticmethod
    def from_json(data: Any) -> RecordId:
        table = _field(data, "tb", str, "record id")
        inner = _field(_field(data, "id", dict, "record id"), "String", str, "record key")
        return RecordId(table, inner)

    def to_json(self) -> dict:
        return {"tb": self.table, "id": {"String": self.inner}}

    def __str__(self) -> str:
        return f"{self.table}:{self.inner}"


@dataclass(frozen=True)
class Record:
    """A reference to a stored record, as returned by writes."""

    id: RecordId

    @staticmethod
    def from_json(data: Any) -> Record:
        return Record(RecordId.from_json(_field(data, "id", dict, "record")))

    def to_json(self) -> dict:
        return {"id": self.id.to_json()}


def _task_fields(data: Any) -> tuple[str, bool]:
    title = _field(data, "title", str, "task")
    completed = _field(data, "completed", bool, "task")
    return title, completed


@dataclass
class Task:
    """A to-do item; ``id`` is set once the task is stored."""

    title: str
    completed: bool = False
    id: RecordId | None = None

    @staticmethod
    def from_json(data: Any) -> Task:
        title, completed = _task_fields(data)
        raw_id = data.get("id")
        record_id = RecordId.from_json(raw_id) if raw_id is not None else None
        return Task(title, completed, record_id)

    def to_json(self) -> dict:
        """Return the body sent to the service; the id is never included."""
        return {"title": self.title, "completed": self.completed}

    def toggle(self) -> None:
        self.completed = not self.completed


@dataclass
class TaskResult:
    """A stored task as read back from the database, id included."""

    id: RecordId
    title: str
    completed: bool

    @staticmethod
    def from_json(data: Any) -> TaskResult:
        record_id = RecordId.from_json(_field(data, "id", dict, "task result"))
        title, completed = _task_fields(data)
        return TaskResult(record_id, title, completed)

    def to_json(self) -> dict:
        return {"id": self.id.to_json(), "title": self.title, "completed": self.completed}

    def to_task(self) -> Task:
        """Return the plain task fields without the id."""
        return Task(self.title, self.completed)