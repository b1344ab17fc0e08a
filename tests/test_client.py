import json

import pytest
import requests
import responses

from todoapp.client import (
    DatabaseContext,
    DatabaseMode,
    InvalidDatabaseModeError,
    InvalidRequestError,
    TaskIdNotAssignedError,
    TaskNotFoundError,
    TasksFetchError,
)
from todoapp.models import RecordId, Task

BASE = "http://127.0.0.1:8000/api"


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


@pytest.fixture
def ctx():
    return DatabaseContext("127.0.0.1:8000/api", DatabaseMode.HTTP)


def stored_task():
    return Task("Buy milk", False, RecordId("tasks", "abc"))


def test_mode_parse_is_case_insensitive():
    assert DatabaseMode.parse("HTTPS") is DatabaseMode.HTTPS
    assert DatabaseMode.parse("http") is DatabaseMode.HTTP
    assert str(DatabaseMode.HTTPS) == "https"


def test_mode_parse_rejects_other_schemes():
    with pytest.raises(InvalidDatabaseModeError) as info:
        DatabaseMode.parse("ftp")
    assert str(info.value) == "Invalid database mode: `ftp`; expected `http` or `https`"


def test_address_is_normalised():
    context = DatabaseContext("http://127.0.0.1:8000/api//", DatabaseMode.HTTPS)
    assert context.addr == "https://127.0.0.1:8000/api"


def test_mode_may_be_given_as_text():
    context = DatabaseContext("https://example.com/api", "http")
    assert context.addr == "http://example.com/api"


def test_get_tasks(rsps, ctx):
    body = {
        "tasks": [
            {"id": {"tb": "tasks", "id": {"String": "abc"}}, "title": "Buy milk", "completed": False},
            {"id": {"tb": "tasks", "id": {"String": "def"}}, "title": "Walk", "completed": True},
        ]
    }
    rsps.add(responses.GET, f"{BASE}/tasks", json=body)
    tasks = ctx.get_tasks()
    assert tasks == [
        stored_task(),
        Task("Walk", True, RecordId("tasks", "def")),
    ]


def test_get_tasks_bad_json(rsps, ctx):
    rsps.add(responses.GET, f"{BASE}/tasks", body="not json")
    with pytest.raises(TasksFetchError) as info:
        ctx.get_tasks()
    assert str(info.value) == "Cannot load tasks from JSON"
    assert isinstance(info.value.__cause__, ValueError)


def test_get_tasks_wrong_shape(rsps, ctx):
    rsps.add(responses.GET, f"{BASE}/tasks", json={"items": []})
    with pytest.raises(TasksFetchError):
        ctx.get_tasks()


def test_connection_failure(rsps, ctx):
    with pytest.raises(InvalidRequestError) as info:
        ctx.get_tasks()
    assert str(info.value) == "Cannot send HTTP request"
    assert isinstance(info.value.__cause__, requests.RequestException)


def test_add_task_assigns_id(rsps, ctx):
    rsps.add(responses.POST, f"{BASE}/tasks", json={"id": {"tb": "tasks", "id": {"String": "xyz"}}})
    created = ctx.add_task(Task("Buy milk"))
    assert created.id == RecordId("tasks", "xyz")
    assert created.title == "Buy milk"
    sent = rsps.calls[0].request
    assert json.loads(sent.body) == {"title": "Buy milk", "completed": False}
    assert sent.headers["Content-Type"] == "application/json"


def test_add_task_bad_reply(rsps, ctx):
    rsps.add(responses.POST, f"{BASE}/tasks", json={"error": "Invalid input data"})
    with pytest.raises(TasksFetchError):
        ctx.add_task(Task("Buy milk"))


def test_update_task_requires_id(ctx):
    with pytest.raises(TaskIdNotAssignedError) as info:
        ctx.update_task(Task("Buy milk"))
    assert str(info.value) == "Task id is not assigned to the task `Buy milk`"


def test_update_task_success(rsps, ctx):
    rsps.add(responses.POST, f"{BASE}/tasks/update/abc", json={"updated": True})
    task = stored_task()
    task.toggle()
    assert ctx.update_task(task) == task
    assert json.loads(rsps.calls[0].request.body) == {"title": "Buy milk", "completed": True}


def test_update_task_not_found(rsps, ctx):
    rsps.add(responses.POST, f"{BASE}/tasks/update/abc", json={"updated": False})
    with pytest.raises(TaskNotFoundError) as info:
        ctx.update_task(stored_task())
    assert str(info.value) == "Task not found: `Buy milk`"


def test_delete_task_success(rsps, ctx):
    rsps.add(responses.POST, f"{BASE}/tasks/delete/abc", json={"deleted": True})
    assert ctx.delete_task(stored_task()) == stored_task()


def test_delete_task_not_found(rsps, ctx):
    rsps.add(responses.POST, f"{BASE}/tasks/delete/abc", json={"deleted": False})
    with pytest.raises(TaskNotFoundError):
        ctx.delete_task(stored_task())


def test_delete_task_requires_id(ctx):
    with pytest.raises(TaskIdNotAssignedError):
        ctx.delete_task(Task("Buy milk"))