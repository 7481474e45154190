"""
Тесты таблицы команд.

Запуск: python -m pytest tests/test_commands.py -v
"""

import logging
import os
import re
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.commands import (
    CommandTable,
    InvalidPatternError,
    UnsafePatternError,
    find_unsafe_patterns,
)


def test_first_registered_wins():
    """Из двух совпавших команд выигрывает зарегистрированная раньше"""
    table = CommandTable()
    table.add("first", ["привет"])
    table.add("second", ["привет всем"])
    assert table.resolve("привет всем") == "first"


def test_resolve_is_deterministic():
    table = CommandTable()
    table.add("a", ["кот"])
    table.add("b", ["кот", "пёс"])
    assert all(table.resolve("кот и пёс") == "a" for _ in range(10))


def test_overwrite_keeps_name():
    """Повторная регистрация перезаписывает команду"""
    table = CommandTable()
    table.add("greeting", ["привет"])
    table.add("greeting", ["здравствуй"])
    assert len(table) == 1
    assert table.resolve("привет") is None
    assert table.resolve("здравствуй") == "greeting"


def test_remove_and_clear():
    table = CommandTable()
    table.add("a", ["а"])
    table.add("b", ["б"])
    table.remove("a")
    table.remove("missing")
    assert "a" not in table
    assert "b" in table

    table.clear()
    table.clear()
    assert len(table) == 0


def test_pattern_command():
    """Шаблонная команда: трёхзначное число"""
    table = CommandTable()
    table.add("code", [r"\b\d{3}\b"], is_pattern=True)
    assert table.resolve("код 482 принят") == "code"
    assert table.resolve("код 48 принят") is None


def test_compiled_slot_without_is_pattern():
    table = CommandTable()
    table.add("digits", ["число", re.compile(r"\d+")])
    assert table.resolve("42") == "digits"


def test_empty_command():
    table = CommandTable()
    table.add("any", ["а"])
    assert table.resolve("") is None


def test_custom_resolver_replaces_default():
    """Своя стратегия поиска полностью заменяет стандартную"""
    table = CommandTable()
    table.add("greeting", ["привет"])
    calls = []

    def resolver(user_command, commands):
        calls.append(user_command)
        return "custom"

    table.set_resolver(resolver)
    assert table.resolve("привет") == "custom"
    assert table.resolve("") == "custom"
    assert calls == ["привет", ""]

    table.set_resolver(None)
    assert table.resolve("привет") == "greeting"


def test_unsafe_pattern_warns(caplog):
    """Опасный шаблон регистрируется с предупреждением"""
    table = CommandTable()
    with caplog.at_level(logging.WARNING):
        table.add("danger", [r"(a+)+b"], is_pattern=True)
    assert "danger" in table
    assert "небезопасные" in caplog.text


def test_unsafe_pattern_strict():
    table = CommandTable(strict_patterns=True)
    with pytest.raises(UnsafePatternError):
        table.add("danger", [r"(a+)+b"], is_pattern=True)
    assert "danger" not in table


def test_find_unsafe_patterns():
    assert find_unsafe_patterns([r"(a+)+"], is_pattern=True) == [r"(a+)+"]
    assert find_unsafe_patterns([r"(a+)+"], is_pattern=False) == []
    assert find_unsafe_patterns([re.compile(r"(a*)*")]) == [r"(a*)*"]
    assert find_unsafe_patterns([r"\b\d{3}\b"], is_pattern=True) == []


def test_callback_stored():
    table = CommandTable()

    def cb(user_command, controller):
        return "ok"

    table.add("x", ["икс"], cb=cb)
    assert table.get("x").cb is cb
    assert [command.name for command in table] == ["x"]


def test_invalid_pattern_rejected_at_registration():
    """Некорректный шаблон отклоняется при регистрации, таблица не меняется"""
    table = CommandTable()
    table.add("code", [r"\b\d{3}\b"], is_pattern=True)
    with pytest.raises(InvalidPatternError):
        table.add("broken", ["(незакрыто"], is_pattern=True)
    assert "broken" not in table
    assert table.resolve("привет мир") is None
    assert table.resolve("код 482") == "code"


def test_invalid_regex_text_without_is_pattern():
    table = CommandTable()
    table.add("plain", ["(незакрыто"])
    assert table.resolve("скобка (незакрыто") == "plain"


def test_nested_quantifiers_detected():
    for source in (r"(\d+)+", r"([a-z]+)*", r"(.*)*", r"(\w+)+$", r"(a+){2,}"):
        assert find_unsafe_patterns([source], is_pattern=True) == [source]
    for source in (r"(да|нет)+", r"(\d+)?", r"\d+\s\d+"):
        assert find_unsafe_patterns([source], is_pattern=True) == []
