"""To-do list JSON HTTP API backed by SurrealDB, with a tkinter desktop client."""

__version__ = "0.1.0"