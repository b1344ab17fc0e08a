"""HTTP client for the task service used by the desktop application."""

from __future__ import annotations

import json
from dataclasses import replace
from enum import Enum
from typing import Any

import requests

from .models import Record, Task


class ClientError(Exception):
    """Base class for errors talking to the task service."""


class InvalidRequestError(ClientError):
    """The HTTP request could not be sent or its reply not read."""

    def __init__(self) -> None:
        super().__init__("Cannot send HTTP request")


class TasksFetchError(ClientError):
    """The service replied with JSON that could not be understood."""

    def __init__(self) -> None:
        super().__init__("Cannot load tasks from JSON")


class InvalidDatabaseModeError(ClientError):
    """A connection mode other than ``http`` or ``https`` was given."""

    def __init__(self, mode: str) -> None:
        self.mode = mode
        super().__init__(f"Invalid database mode: `{mode}`; expected `http` or `https`")


class TaskNotFoundError(ClientError):
    """The service reported that the task does not exist."""

    def __init__(self, title: str) -> None:
        self.title = title
        super().__init__(f"Task not found: `{title}`")


class TaskIdNotAssignedError(ClientError):
    """The task has no id yet, so the service cannot address it."""

    def __init__(self, title: str) -> None:
        self.title = title
        super().__init__(f"Task id is not assigned to the task `{title}`")


class DatabaseMode(Enum):
    """URL scheme used to reach the service."""

    HTTP = "http"
    HTTPS = "https"

    @classmethod
    def parse(cls, text: str) -> DatabaseMode:
        """Parse ``http`` or ``https`` in any letter case."""
        try:
            return cls(text.lower())
        except ValueError:
            raise InvalidDatabaseModeError(text) from None

    def __str__(self) -> str:
        return self.value


def _strip_repeated(text: str, prefix: str) -> str:
    while text.startswith(prefix):
        text = text[len(prefix):]
    return text


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as exc:
        raise TasksFetchError() from exc


_JSON_HEADERS = {"accept": "application/json", "Content-Type": "application/json"}


class DatabaseContext:
    """Requests against the task service at a fixed base address."""

    def __init__(self, addr: str, mode: DatabaseMode | str) -> None:
        if not isinstance(mode, DatabaseMode):
            mode = DatabaseMode.parse(mode)
        host = addr.rstrip("/")
        host = _strip_repeated(host, "http://")
        host = _strip_repeated(host, "https://")
        self._addr = f"{mode}://{host}"
        self._session = requests.Session()

    @property
    def addr(self) -> str:
        """Base URL of the service."""
        return self._addr

    def _post(self, url: str, headers: dict, body: str | None = None) -> str:
        try:
            return self._session.post(url, headers=headers, data=body).text
        except requests.RequestException as exc:
            raise InvalidRequestError() from exc

    def get_tasks(self) -> list[Task]:
        """Fetch every task from the service."""
        try:
            text = self._session.get(f"{self._addr}/tasks").text
        except requests.RequestException as exc:
            raise InvalidRequestError() from exc

        data = _parse_json(text)
        try:
            if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
                raise ValueError("expected an object with a `tasks` list")
            return [Task.from_json(item) for item in data["tasks"]]
        except ValueError as exc:
            raise TasksFetchError() from exc

    def add_task(self, task: Task) -> Task:
        """Create ``task`` on the service; return it with its new id."""
        text = self._post(f"{self._addr}/tasks", _JSON_HEADERS, json.dumps(task.to_json()))
        data = _parse_json(text)
        try:
            record = Record.from_json(data)
        except ValueError as exc:
            raise TasksFetchError() from exc
        return replace(task, id=record.id)

    def update_task(self, task: Task) -> Task:
        """Store the new content of ``task``; raise if it is unknown."""
        if task.id is None:
            raise TaskIdNotAssignedError(task.title)

        url = f"{self._addr}/tasks/update/{task.id.inner}"
        data = _parse_json(self._post(url, _JSON_HEADERS, json.dumps(task.to_json())))
        if isinstance(data, dict) and data.get("updated") is True:
            return task
        raise TaskNotFoundError(task.title)

    def delete_task(self, task: Task) -> Task:
        """Delete ``task`` on the service; raise if it is unknown."""
        if task.id is None:
            raise TaskIdNotAssignedError(task.title)

        url = f"{self._addr}/tasks/delete/{task.id.inner}"
        data = _parse_json(self._post(url, {"accept": "application/json"}))
        if isinstance(data, dict) and data.get("deleted") is True:
            return task
        raise TaskNotFoundError(task.title)