"""Desktop window of the to-do client, built on tkinter."""

from __future__ import annotations

import argparse
import logging
import queue
import threading
from typing import Any, Callable, NamedTuple

from .client import DatabaseContext, DatabaseMode, InvalidDatabaseModeError
from .controller import ScreenId, TodoController, format_error
from .logger import Logger
from .models import Task

log = logging.getLogger(__name__)

TITLE = "Todo App"
_POLL_MS = 50


class _Size(NamedTuple):
    width: int
    height: int


WINDOW_SIZE = _Size(640, 480)


class TodoApp:
    """Main window: a header, the task list or error screen, and an add dialog.

    Network work runs on worker threads; their results reach the window
    through a queue that the Tk event loop drains.
    """

    def __init__(self, controller: TodoController) -> None:
        self.controller = controller
        self._events: queue.Queue[tuple[str, Any]] = queue.Queue()
        self._lock = threading.Lock()
        self._root: Any = None
        self._screens: dict[ScreenId, Any] = {}
        self._task_frame: Any = None
        self._dialog: Any = None
        self._entry: Any = None
        controller.on_tasks_changed = lambda tasks: self._post("tasks", tasks)
        controller.on_error = lambda message: self._post("error", message)

    # -- event plumbing -------------------------------------------------

    def _post(self, kind: str, payload: Any) -> None:
        if self._root is None:
            if kind == "error":
                log.error("%s", payload.rstrip("\n"))
            return
        self._events.put((kind, payload))

    def _spawn(self, name: str, action: Callable[..., Any], *args: Any) -> None:
        def work() -> None:
            with self._lock:
                action(*args)
                screen = self.controller.current_screen
            self._post("screen", screen)

        threading.Thread(target=work, name=name, daemon=True).start()

    def _poll(self) -> None:
        if self._root is None:
            return
        while True:
            try:
                kind, payload = self._events.get_nowait()
            except queue.Empty:
                break
            if kind == "tasks":
                self._render_tasks(payload)
            elif kind == "error":
                self._show_dialog(payload)
            elif kind == "screen":
                self._show_screen(payload)
        self._root.after(_POLL_MS, self._poll)

    # -- public API -----------------------------------------------------

    def run(self) -> None:
        """Open the window, fetch the tasks and run until the window closes."""
        import tkinter as tk

        try:
            root = tk.Tk()
        except tk.TclError as exc:
            raise RuntimeError(f"Cannot execute todo-app: {exc}") from exc

        self._root = root
        try:
            self._build(root)
            self._spawn("get tasks thread", self.controller.load_tasks)
            root.after(_POLL_MS, self._poll)
            root.mainloop()
        finally:
            self._root = None
            try:
                root.destroy()
            except tk.TclError:
                pass

    def quit(self) -> None:
        """Leave the event loop, closing the window."""
        if self._root is not None:
            self._root.quit()

    def show_error(self, err: BaseException, depth: int | None = None) -> str:
        """Show ``err`` and up to ``depth`` causes; return the shown text."""
        message = format_error(err, depth)
        self._post("error", message)
        return message

    # -- view -----------------------------------------------------------

    def _build(self, root: Any) -> None:
        import tkinter as tk

        root.title(TITLE)
        root.resizable(False, False)
        width, height = WINDOW_SIZE
        x = max((root.winfo_screenwidth() - width) // 2, 0)
        y = max((root.winfo_screenheight() - height) // 2, 0)
        root.geometry(f"{width}x{height}+{x}+{y}")
        root.protocol("WM_DELETE_WINDOW", self.quit)

        header = tk.Frame(root, padx=6, pady=4)
        header.pack(side=tk.TOP, fill=tk.X)
        tk.Button(header, text="+", width=3, command=self._open_add_dialog).pack(side=tk.LEFT)
        tk.Button(header, text="\u2261", width=3).pack(side=tk.RIGHT)
        tk.Label(header, text=TITLE, font=("TkDefaultFont", 11, "bold")).pack(
            side=tk.LEFT, expand=True
        )

        content = tk.Frame(root)
        content.pack(side=tk.TOP, fill=tk.BOTH, expand=True)

        main = tk.Frame(content, padx=10, pady=10)
        self._task_frame = main

        error = tk.Frame(content)
        inner = tk.Frame(error)
        inner.place(relx=0.5, rely=0.5, anchor=tk.CENTER)
        tk.Label(inner, text="\u2139", font=("TkDefaultFont", 32)).pack(pady=5)
        tk.Label(inner, text="Cannot connect to the server").pack(pady=5)
        tk.Button(
            inner,
            text="Try again",
            command=lambda: self._spawn("get tasks thread", self.controller.load_tasks),
        ).pack(pady=5)

        self._screens = {ScreenId.MAIN: main, ScreenId.ERROR: error}
        self._show_screen(self.controller.current_screen)
        self._build_add_dialog(root)

    def _build_add_dialog(self, root: Any) -> None:
        import tkinter as tk

        dialog = tk.Toplevel(root, padx=10, pady=10)
        dialog.title("Add Task")
        dialog.resizable(False, False)
        dialog.protocol("WM_DELETE_WINDOW", self._cancel_add)
        tk.Label(dialog, text="Task name").pack(fill=tk.X, pady=5)
        entry = tk.Entry(dialog, width=36)
        entry.pack(fill=tk.X, pady=5)
        entry.bind("<Return>", lambda _event: self._confirm_add())
        tk.Button(dialog, text="OK", command=self._confirm_add).pack(fill=tk.X, pady=5)
        tk.Button(dialog, text="Cancel", command=self._cancel_add).pack(fill=tk.X, pady=5)
        dialog.withdraw()
        self._dialog = dialog
        self._entry = entry

    def _show_screen(self, screen: ScreenId) -> None:
        import tkinter as tk

        for frame in self._screens.values():
            frame.pack_forget()
        frame = self._screens.get(screen)
        if frame is not None:
            frame.pack(fill=tk.BOTH, expand=True)

    def _render_tasks(self, tasks: list[Task]) -> None:
        import tkinter as tk

        if self._task_frame is None:
            return
        for child in self._task_frame.winfo_children():
            child.destroy()
        for task in tasks:
            self._task_panel(tk, task)

    def _task_panel(self, tk: Any, task: Task) -> None:
        panel = tk.Frame(self._task_frame, bd=1, relief=tk.GROOVE, padx=10, pady=10)
        panel.pack(fill=tk.X, pady=5)
        checked = tk.BooleanVar(master=panel, value=task.completed)
        tk.Checkbutton(
            panel,
            variable=checked,
            command=lambda: self._spawn("update task thread", self.controller.toggle_task, task),
        ).pack(side=tk.LEFT)
        tk.Label(panel, text=task.title, anchor=tk.W).pack(side=tk.LEFT, padx=10)
        tk.Frame(panel).pack(side=tk.LEFT, fill=tk.X, expand=True)
        tk.Button(
            panel,
            text="\u2715",
            command=lambda: self._spawn("delete task thread", self.controller.delete_task, task),
        ).pack(side=tk.RIGHT)

    def _show_dialog(self, message: str) -> None:
        from tkinter import messagebox

        messagebox.showerror(TITLE, message, parent=self._root)

    def _open_add_dialog(self) -> None:
        if not self.controller.can_add_tasks or self._dialog is None:
            return
        self._entry.delete(0, "end")
        self._dialog.transient(self._root)
        self._root.update_idletasks()
        x = self._root.winfo_rootx() + self._root.winfo_width() // 2 - 150
        y = self._root.winfo_rooty() + self._root.winfo_height() // 2 - 80
        self._dialog.geometry(f"+{max(x, 0)}+{max(y, 0)}")
        self._dialog.deiconify()
        self._dialog.grab_set()
        self._entry.focus_set()

    def _hide_add_dialog(self) -> None:
        self._dialog.grab_release()
        self._dialog.withdraw()

    def _confirm_add(self) -> None:
        title = self._entry.get()
        if not title:
            self.controller.add_task(title)
            return
        self._spawn("add task thread", self.controller.add_task, title)
        self._hide_add_dialog()

    def _cancel_add(self) -> None:
        self._hide_add_dialog()
        self._entry.delete(0, "end")


def _mode(text: str) -> DatabaseMode:
    try:
        return DatabaseMode.parse(text)
    except InvalidDatabaseModeError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse the desktop client's command line."""
    parser = argparse.ArgumentParser(prog="todo_desktop")
    parser.add_argument(
        "-A",
        "--addr",
        required=True,
        help="Database address, the URL of the server, "
        "e.g. `127.0.0.1:8000/api` or `https://mywebsite.com/api`",
    )
    parser.add_argument(
        "-M",
        "--mode",
        required=True,
        type=_mode,
        help="Database connection mode: `http` or `https`",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Start the desktop client."""
    args = parse_args(argv)
    Logger.try_init()
    context = DatabaseContext(args.addr, args.mode)
    TodoApp(TodoController(context)).run()


if __name__ == "__main__":
    main()