"""Application state and actions of the desktop to-do client."""

from __future__ import annotations

import itertools
import logging
from dataclasses import replace
from enum import Enum
from typing import Any, Callable, Iterator

from .client import ClientError
from .models import Task

log = logging.getLogger(__name__)


class ScreenId(Enum):
    """The screens the application can show."""

    MAIN = "Main"
    ERROR = "Error"


def _causes(err: BaseException) -> Iterator[BaseException]:
    seen = {id(err)}
    current = err
    while True:
        nxt = current.__cause__
        if nxt is None and not current.__suppress_context__:
            nxt = current.__context__
        if nxt is None or id(nxt) in seen:
            return
        seen.add(id(nxt))
        yield nxt
        current = nxt


def format_error(err: BaseException, depth: int | None = None) -> str:
    """Describe ``err`` and up to ``depth`` of its causes, one per line."""
    causes: Iterator[BaseException] = _causes(err)
    if depth is not None:
        causes = itertools.islice(causes, depth)
    lines = [f"Error: {err}\n"]
    lines.extend(f"Caused by: {cause}\n" for cause in causes)
    return "".join(lines)


def _log_error(message: str) -> None:
    log.error("%s", message.rstrip("\n"))


class TodoController:
    """Holds the task list and carries out user actions through ``context``.

    ``on_tasks_changed`` receives the new task list whenever it changes and
    ``on_error`` receives a formatted error message.
    """

    def __init__(self, context: Any) -> None:
        self.context = context
        self.tasks: list[Task] | None = None
        self.current_screen = ScreenId.MAIN
        self.on_tasks_changed: Callable[[list[Task]], None] = lambda tasks: None
        self.on_error: Callable[[str], None] = _log_error

    @property
    def can_add_tasks(self) -> bool:
        """Whether the add-task dialog may be opened."""
        return self.current_screen is ScreenId.MAIN

    def _report(self, err: BaseException, depth: int | None) -> None:
        self.on_error(format_error(err, depth))

    def _notify(self) -> None:
        if self.tasks is not None:
            self.on_tasks_changed(list(self.tasks))

    def _index_of(self, task: Task) -> int | None:
        if self.tasks is None:
            return None
        return next((i for i, t in enumerate(self.tasks) if t.id == task.id), None)

    def load_tasks(self) -> list[Task] | None:
        """Fetch all tasks; switch to the error screen if that fails."""
        try:
            tasks = self.context.get_tasks()
        except ClientError as exc:
            self.current_screen = ScreenId.ERROR
            self._report(exc, 2)
            return None
        self.current_screen = ScreenId.MAIN
        self.tasks = list(tasks)
        self._notify()
        return list(self.tasks)

    def add_task(self, title: str) -> Task | None:
        """Create a task titled ``title``; empty titles are refused."""
        if not title:
            self._report(ValueError("Task title cannot be empty"), 1)
            return None
        try:
            created = self.context.add_task(Task(title))
        except ClientError as exc:
            self._report(exc, 2)
            return None
        if self.tasks is not None:
            self.tasks.append(created)
            self._notify()
        return created

    def update_task(self, task: Task) -> Task | None:
        """Store a changed task and replace it in the list."""
        try:
            updated = self.context.update_task(task)
        except ClientError as exc:
            self._report(exc, 2)
            return None
        if self.tasks is not None:
            index = self._index_of(updated)
            if index is not None:
                self.tasks[index] = updated
            self._notify()
        return updated

    def delete_task(self, task: Task) -> Task | None:
        """Delete a task and drop it from the list."""
        try:
            deleted = self.context.delete_task(task)
        except ClientError as exc:
            self._report(exc, 2)
            return None
        if self.tasks is not None:
            index = self._index_of(deleted)
            if index is not None:
                del self.tasks[index]
            self._notify()
        return deleted

    def toggle_task(self, task: Task) -> Task | None:
        """Flip a task's completion and store the change."""
        toggled = replace(task)
        toggled.toggle()
        return self.update_task(toggled)