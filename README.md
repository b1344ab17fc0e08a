# todoapp

A small to-do list system in two parts:

- **todo-api** — an HTTP server exposing tasks as JSON, storing them in a
  SurrealDB database (namespace `todo`, database `todo`, table `tasks`).
- **todo-desktop** — a tkinter window that lists, adds, toggles and deletes
  tasks by talking to that API.

## Installation

```
pip install .
```

The desktop client needs Python's `tkinter` module, which some systems
package separately.

For running the tests:

```
pip install ".[test]"
pytest
```

## Running the API server

The server connects to a running SurrealDB instance over its WebSocket
JSON-RPC endpoint, signs in as a root user and selects namespace and database
`todo`:

```
todo-api --addr 127.0.0.1:8001 --username root --passwd password
```

| Option             | Meaning                         |
|--------------------|---------------------------------|
| `-A`, `--addr`     | Database address                |
| `-U`, `--username` | Authentication username         |
| `-P`, `--passwd`   | Authentication password         |
| `-V`, `--version`  | Print the version and exit      |

An address without a scheme gets `ws://` in front, and `/rpc` is appended
unless it is already there, so `127.0.0.1:8001` becomes
`ws://127.0.0.1:8001/rpc`.

If the database cannot be reached, or the credentials are rejected, the
server logs the error and exits with status 1. Otherwise it serves on
`127.0.0.1:8000`; the host and port are fixed.

### Endpoints

| Method | Path                       | Body                                   | Reply                                   |
|--------|----------------------------|----------------------------------------|-----------------------------------------|
| GET    | `/api/tasks`               | —                                      | `{"tasks": [...]}`, each with its `id`  |
| POST   | `/api/tasks`               | `{"title": "...", "completed": false}` | the created record, `{"id": ...}`       |
| POST   | `/api/tasks/update/<id>`   | `{"title": "...", "completed": true}`  | `{"updated": true}` or `false`          |
| POST   | `/api/tasks/delete/<id>`   | —                                      | `{"deleted": true}` or `false`          |
| GET    | `/api/openapi.json`        | —                                      | an OpenAPI 3 description of the above   |

Record ids have the form `{"tb": "tasks", "id": {"String": "<key>"}}`; the
`<id>` in a path is the key alone.

A create or update request whose body is not an object with a string `title`
and a boolean `completed` is answered with status 400. Errors are returned as
`{"error": "<message>"}`: 400 for invalid input, 404 for a missing resource,
500 for database failures. Update and delete do not report database failures
as errors; they answer `false`.

Every response carries permissive CORS headers
(`Access-Control-Allow-Origin: *` and the like), and `OPTIONS` requests are
answered with an empty `200 OK`.

`todoapp.api.create_app(database)` builds the Flask application around any
object with the `select`, `insert`, `update` and `delete` methods of
`todoapp.store.Database`, which is handy for embedding or testing.

## Running the desktop client

```
todo-desktop --addr 127.0.0.1:8000/api --mode http
```

| Option         | Meaning                                                   |
|----------------|-----------------------------------------------------------|
| `-A`, `--addr` | Address of the API, e.g. `127.0.0.1:8000/api`             |
| `-M`, `--mode` | Connection mode: `http` or `https` (case-insensitive)     |

A trailing `/` and a leading `http://` or `https://` in the address are
dropped; the scheme is always taken from `--mode`.

The 640×480 window shows one row per task with a check box to mark it done
and a button to delete it. The **+** button in the header opens a dialog for
a new task (Enter or **OK** confirms, **Cancel** closes it); an empty title is
refused with an error message. If the tasks cannot be fetched, an error
screen with a **Try again** button replaces the list. Requests run on
background threads so the window stays responsive.

## Using the client from Python

```python
from todoapp.client import DatabaseContext, DatabaseMode
from todoapp.models import Task

ctx = DatabaseContext("127.0.0.1:8000/api", DatabaseMode.parse("http"))
tasks = ctx.get_tasks()
created = ctx.add_task(Task("Buy milk"))
created.toggle()
ctx.update_task(created)
ctx.delete_task(created)
```

Failures raise subclasses of `todoapp.client.ClientError`:
`InvalidRequestError` when the request cannot be sent, `TasksFetchError` when
the reply is not the expected JSON, `TaskNotFoundError` when the server
reports nothing was changed, `TaskIdNotAssignedError` when a task has never
been stored, and `InvalidDatabaseModeError` for a mode other than `http` or
`https`.

`todoapp.controller.TodoController` wraps a `DatabaseContext` and keeps the
task list in step with the server, reporting changes and errors through its
`on_tasks_changed` and `on_error` callbacks; the desktop window is built on it.

## Logging

Both commands log through `todoapp.logger.Logger`, which prints to standard
output lines of the form `LEVEL target > message`, where the target is the
top-level package name, padded to the widest target seen so far. Level names
are coloured when standard output is a terminal or `CLICOLOR_FORCE` is set,
and left plain when `NO_COLOR` is set or `CLICOLOR=0`.

## Limitations

- The server offers no interactive API documentation page; only the
  `/api/openapi.json` description is served.
- The menu button at the right of the desktop header has no action.
- The server's listening address cannot be configured.