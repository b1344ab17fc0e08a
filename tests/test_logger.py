import logging
import re

import pytest

from todoapp.logger import (
    Logger,
    LoggerLevel,
    PrettyFormatter,
    colored_level,
    split_target,
)

ANSI = re.compile(r"\x1b\[[0-9;]*m")


def _record(name, level, msg, *args):
    return logging.LogRecord(name, level, __file__, 1, msg, args, None)


@pytest.fixture
def clean_root(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("CLICOLOR_FORCE", raising=False)
    root = logging.getLogger()
    old_level = root.level
    yield root
    for handler in list(root.handlers):
        if isinstance(handler.formatter, PrettyFormatter):
            root.removeHandler(handler)
    root.setLevel(old_level)


def test_split_target_takes_first_component():
    assert split_target("todoapp.store.db") == "todoapp"
    assert split_target("todoapp") == "todoapp"


def test_colored_level_labels():
    assert "ERROR" in colored_level(logging.ERROR)
    assert "INFO " in colored_level(logging.INFO)
    assert "WARN " in colored_level(logging.WARNING)
    assert "DEBUG" in colored_level(logging.DEBUG)
    assert "TRACE" in colored_level(LoggerLevel.TRACE.value)


def test_colored_level_strips_to_label():
    assert ANSI.sub("", colored_level(logging.ERROR)) == "ERROR"


def test_plain_format():
    formatter = PrettyFormatter(use_color=False)
    line = formatter.format(_record("todoapp.store", logging.INFO, "hello %s", "x"))
    assert line == "INFO  todoapp > hello x"


def test_width_grows_and_is_kept():
    formatter = PrettyFormatter(use_color=False)
    first = formatter.format(_record("ab", logging.INFO, "m"))
    second = formatter.format(_record("abcdef", logging.INFO, "m"))
    third = formatter.format(_record("ab.c", logging.INFO, "m"))
    assert len(first) < len(second)
    assert len(third) == len(second)
    assert third.startswith("INFO  ab")


def test_colored_format_matches_plain_after_stripping():
    plain = PrettyFormatter(use_color=False)
    colored = PrettyFormatter(use_color=True)
    record = _record("todoapp.api", logging.WARNING, "careful")
    colored_line = colored.format(record)
    assert ANSI.search(colored_line)
    assert ANSI.sub("", colored_line) == plain.format(record)


def test_none_level_installs_nothing(clean_root):
    before = list(clean_root.handlers)
    assert Logger.try_init_with_level(LoggerLevel.NONE) is True
    assert clean_root.handlers == before


def test_try_init_twice(clean_root):
    assert Logger.try_init() is True
    assert Logger.try_init() is False
    with pytest.raises(RuntimeError):
        Logger.init()


def test_init_with_level_twice_raises(clean_root):
    Logger.init_with_level(LoggerLevel.DEBUG)
    with pytest.raises(RuntimeError):
        Logger.init_with_level(LoggerLevel.ERROR)


def test_output_goes_to_stdout(clean_root, capsys):
    Logger.init()
    logging.getLogger("todoapp.sample").info("hi there")
    out = capsys.readouterr().out
    assert "todoapp" in out
    assert out.rstrip().endswith("> hi there")
    assert out.startswith("INFO ")


def test_level_filters(clean_root, capsys):
    Logger.init_with_level(LoggerLevel.WARNING)
    log = logging.getLogger("todoapp.sample")
    log.info("quiet")
    log.warning("loud")
    out = capsys.readouterr().out
    assert "quiet" not in out
    assert "loud" in out