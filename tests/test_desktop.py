import logging

import pytest

from todoapp.client import DatabaseMode, TaskNotFoundError
from todoapp.controller import TodoController
from todoapp.desktop import TodoApp, main, parse_args
from todoapp.models import RecordId, Task


class FakeContext:
    def __init__(self, tasks=None, fail=None):
        self.tasks = list(tasks or [])
        self.fail = fail

    def get_tasks(self):
        if self.fail:
            raise self.fail
        return list(self.tasks)

    def add_task(self, task):
        if self.fail:
            raise self.fail
        return Task(task.title, task.completed, RecordId("tasks", "new"))

    def update_task(self, task):
        if self.fail:
            raise self.fail
        return task

    def delete_task(self, task):
        if self.fail:
            raise self.fail
        return task


def make_app(context=None):
    controller = TodoController(context or FakeContext())
    return TodoApp(controller), controller


def chained_error():
    try:
        try:
            raise ValueError("inner")
        except ValueError as inner:
            raise RuntimeError("middle") from inner
    except RuntimeError as middle:
        try:
            raise KeyError("outer") from middle
        except KeyError as outer:
            return outer


def test_show_error_limits_causes_to_depth():
    app, _ = make_app()
    err = chained_error()
    message = app.show_error(err, 1)
    assert message.startswith(f"Error: {err}\n")
    assert message.count("Caused by:") == 1
    assert "Caused by: middle\n" in message
    assert "inner" not in message


def test_show_error_without_depth_lists_all_causes():
    app, _ = make_app()
    message = app.show_error(chained_error(), None)
    lines = message.splitlines()
    assert lines[1:] == ["Caused by: middle", "Caused by: inner"]


def test_show_error_without_window_logs_message(caplog):
    app, _ = make_app()
    with caplog.at_level(logging.ERROR):
        app.show_error(RuntimeError("boom"), 2)
    assert "Error: boom" in caplog.text


def test_controller_errors_reach_the_app(caplog):
    app, controller = make_app(FakeContext(fail=TaskNotFoundError("write docs")))
    task = Task("write docs", False, RecordId("tasks", "a1"))
    with caplog.at_level(logging.ERROR):
        result = controller.delete_task(task)
    assert result is None
    assert "Task not found: `write docs`" in caplog.text
    assert app.controller is controller


def test_empty_title_is_reported(caplog):
    _, controller = make_app()
    with caplog.at_level(logging.ERROR):
        assert controller.add_task("") is None
    assert "Task title cannot be empty" in caplog.text


def test_headless_task_updates_keep_controller_state():
    tasks = [Task("one", False, RecordId("tasks", "1")), Task("two", True, RecordId("tasks", "2"))]
    _, controller = make_app(FakeContext(tasks))
    assert controller.load_tasks() == tasks
    added = controller.add_task("three")
    assert controller.tasks[-1] == added
    assert len(controller.tasks) == 3


def test_parse_args_short_options():
    args = parse_args(["-A", "127.0.0.1:8000/api", "-M", "HTTPS"])
    assert args.addr == "127.0.0.1:8000/api"
    assert args.mode is DatabaseMode.HTTPS


def test_parse_args_long_options():
    args = parse_args(["--addr", "https://mywebsite.com/api", "--mode", "http"])
    assert args.addr == "https://mywebsite.com/api"
    assert args.mode is DatabaseMode.HTTP


def test_parse_args_rejects_unknown_mode(capsys):
    with pytest.raises(SystemExit) as info:
        parse_args(["-A", "localhost/api", "-M", "ftp"])
    assert info.value.code == 2
    assert "Invalid database mode: `ftp`" in capsys.readouterr().err


def test_parse_args_requires_address():
    with pytest.raises(SystemExit) as info:
        parse_args(["-M", "http"])
    assert info.value.code == 2


def test_main_exits_on_bad_arguments():
    with pytest.raises(SystemExit) as info:
        main(["--addr", "localhost/api"])
    assert info.value.code == 2