"""
Тесты функций работы с текстом.

Запуск: python -m pytest tests/test_text.py -v
"""

import os
import re
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core import text
from core.text import (
    get_ending,
    is_say_false,
    is_say_text,
    is_say_true,
    resize,
    text_similarity,
)


def test_get_ending():
    """Склонение по числу"""
    titles = ["a", "b", "c"]
    assert get_ending(1, titles) == "a"
    assert get_ending(2, titles) == "b"
    assert get_ending(4, titles) == "b"
    assert get_ending(5, titles) == "c"
    assert get_ending(11, titles) == "c"
    assert get_ending(14, titles) == "c"
    assert get_ending(21, titles) == "a"
    assert get_ending(112, titles) == "c"
    assert get_ending(0, titles) == "c"
    assert get_ending(5, titles, index=0) == "a"


def test_resize():
    """Обрезка текста"""
    assert resize("привет", 10) == "привет"
    assert resize("", 10) == ""
    assert resize(None, 10) == ""

    result = resize("a" * 20, 10)
    assert len(result) == 10
    assert result.endswith("...")

    assert resize("abcdefgh", 5, is_ellipsis=False) == "abcde"
    assert resize("abcdefgh", 2) == "ab"


def test_is_say_text_substring():
    """Поиск подстроки с учётом регистра"""
    assert is_say_text("при", "привет")
    assert is_say_text(["пока", "вет"], "привет")
    assert not is_say_text("Привет", "привет")
    assert not is_say_text(["пока"], "привет")
    assert not is_say_text("привет", "")


def test_is_say_text_pattern():
    """Регулярные выражения"""
    assert is_say_text([r"\b\d{3}\b"], "код 482 принят", is_pattern=True)
    assert not is_say_text([r"\b\d{3}\b"], "код 48 принят", is_pattern=True)
    assert is_say_text(["пока", r"\d+"], "номер 5", is_pattern=True)


def test_compiled_pattern_always_regex():
    """Скомпилированный шаблон проверяется как регулярное выражение без is_pattern"""
    assert is_say_text([re.compile(r"^\d+$")], "123")
    assert is_say_text(["нет такого", re.compile(r"да+")], "дааа")
    assert not is_say_text([re.compile(r"^\d+$")], "12a")


def test_is_say_true_false():
    """Согласие и отказ"""
    assert is_say_true("да")
    assert is_say_true("ну конечно")
    assert is_say_true("я согласен")
    assert not is_say_true("дальше")

    assert is_say_false("нет")
    assert is_say_false("не хочу")
    assert not is_say_false("нетрудно")


def test_text_similarity():
    """Схожесть строк"""
    result = text_similarity("привет", "привет")
    assert result["status"] is True
    assert result["percent"] == 100

    result = text_similarity("Привет", ["пока", "ПРИВЕТ"])
    assert result["status"] is True
    assert result["index"] == 1

    result = text_similarity("привет", ["привед", "пока"])
    assert result["index"] == 0
    assert result["percent"] > 80
    assert result["status"] is True

    result = text_similarity("абв", ["где"], threshold=80)
    assert result["status"] is False


def test_text_similarity_first_best_wins():
    """При равной схожести побеждает первый кандидат"""
    result = text_similarity("кот", ["кит", "кат"])
    assert result["index"] == 0
    assert result["text"] == "кит"


def test_regex_cache_cleared_at_limit(monkeypatch):
    """Кэш шаблонов очищается целиком при достижении лимита"""
    monkeypatch.setattr(text, "REGEX_CACHE_SIZE", 3)
    text.clear_cache()
    for i in range(3):
        text.get_cached_regex(f"a{i}")
    assert text.cache_size() == 3

    text.get_cached_regex("b")
    assert text.cache_size() == 1
    text.clear_cache()
