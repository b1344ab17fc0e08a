[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "todoapp"
version = "0.1.0"
description = "A small to-do list system: a JSON HTTP API storing tasks in SurrealDB, and a desktop client for it"
requires-python = ">=3.10"
keywords = ["todo", "tasks", "rest", "api", "surrealdb", "desktop", "tkinter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Environment :: X11 Applications",
    "Framework :: Flask",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask",
    "requests",
    "websocket-client",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
todo-api = "todoapp.api:main"
todo-desktop = "todoapp.desktop:main"

[tool.hatch.build.targets.wheel]
packages = ["todoapp"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
